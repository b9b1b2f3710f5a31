import json
import pytest
from domain_cert.errors.config_error import ConfigError
from domain_cert.models.cert_config import CertConfig, DomainEntry
from domain_cert.bootstrap import DEFAULT_CONFIG


def test_parse_default_bootstrap_config():
    conf = CertConfig.from_json(DEFAULT_CONFIG)
    
    assert conf.renew_days == 60
    assert conf.web_enable is True
    assert conf.web_user == "admin"
    assert conf.domains == (DomainEntry("example.com", "/www/wwwroot/example.com", "/www/server/panel/vhost/cert/example.com"),)


def test_missing_and_null_keys_fall_back_to_zero_values():
    conf = CertConfig.from_json(b'{"email": null, "domains": [{"domain": "a.test"}], "extra": 1}')
    
    assert conf == CertConfig(domains=(DomainEntry(domain="a.test"),))


def test_no_semantic_validation():
    raw = json.dumps({ "renew_days": -5, "web_user": "", "web_pass": "", "domains": [] })
    conf = CertConfig.from_json(raw)
    
    assert conf.renew_days == -5
    assert conf.domains == ()


@pytest.mark.parametrize("raw", [
    b"{not json",
    b"[]",
    b'"text"',
    b'{"renew_days": "60"}',
    b'{"renew_days": 60.5}',
    b'{"renew_days": true}',
    b'{"web_enable": "yes"}',
    b'{"domains": {"domain": "a.test"}}',
    b'{"domains": ["a.test"]}',
    b'{"domains": [{"webroot": 1}]}',
    b"\xff\xfe\xfa",
])
def test_structural_errors_raise_config_error(raw):
    with pytest.raises(ConfigError):
        CertConfig.from_json(raw)


def test_error_message_names_the_field():
    with pytest.raises(ConfigError, match=r"domains\[1\]\.install_path"):
        CertConfig.from_json(b'{"domains": [{}, {"install_path": 5}]}')


def test_to_dict_keeps_field_order():
    conf = CertConfig.from_json(DEFAULT_CONFIG)
    
    assert list(conf.to_dict().keys()) == ["email", "renew_days", "web_enable", "web_user", "web_pass", "domains"]
    assert conf.to_dict() == json.loads(DEFAULT_CONFIG)
