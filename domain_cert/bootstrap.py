import logging
from domain_cert.conf.settings import Settings

log = logging.getLogger(__name__)

DEFAULT_CONFIG = """{
  "email": "admin@example.com",
  "renew_days": 60,
  "web_enable": true,
  "web_user": "admin",
  "web_pass": "123456",
  "domains": [
    {
      "domain": "example.com",
      "webroot": "/www/wwwroot/example.com",
      "install_path": "/www/server/panel/vhost/cert/example.com"
    }
  ]
}"""

DEFAULT_INDEX_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Domain certificates</title></head>
<body>
<h2>Domain SSL management</h2>
<textarea id="cfg" style="width:700px;height:350px;"></textarea><br>
<button onclick="save()">Save config</button>
<button onclick="issue()">Issue certificates</button>
<div id="msg" style="color:green;margin-top:10px;"></div>
<script>
fetch('/api/config').then(r=>r.json()).then(j=>{
 document.getElementById('cfg').value=JSON.stringify(j,null,2)
})
function flash(t,c){
 let m=document.getElementById('msg');m.style.color=c;m.innerText=t;
 setTimeout(()=>m.innerText='',1000)
}
function save(){
 fetch('/api/config',{method:'POST',body:cfg.value}).then(r=>r.text()).then(t=>{
   if(t==='ok') flash('Saved','green'); else flash(t,'red')
 })
}
function issue(){
 fetch('/api/issue',{method:'POST'}).then(r=>r.text()).then(t=>{
   if(t==='started') flash('Issuance started','green'); else flash('Issuance already running','orange')
 })
}
</script>
</body>
</html>
"""


def init_files(settings: Settings) -> list[str]:
    """Write the default config and console page when they are missing.
    
    Existing files are never touched. Returns the paths that were created.
    """
    created = []
    settings.base_dir.mkdir(parents=True, exist_ok=True)
    
    if not settings.config_file.exists():
        settings.config_file.write_text(DEFAULT_CONFIG, encoding="utf-8")
        created.append(str(settings.config_file))
    
    if not settings.index_file.exists():
        settings.index_file.parent.mkdir(parents=True, exist_ok=True)
        settings.index_file.write_text(DEFAULT_INDEX_HTML, encoding="utf-8")
        created.append(str(settings.index_file))
    
    for path in created:
        log.info(f"Created default file '{path}'")
    
    return created
