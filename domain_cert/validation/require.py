import re
from typing import Any, Match, Type, TypeVar, Pattern
from domain_cert.errors.validation_error import ValidationError

T = TypeVar("T")


class Require():
    @staticmethod
    def match(
        field: str, 
        val: Any, 
        pattern: str | Pattern[str], 
        custom_err: str | None = None
    ) -> Match[str]:
        match = re.fullmatch(pattern, str(val))
        if not match:
            Require._raise_error(
                default_err=f"Value '{field}={val}' does not match to '{pattern}' pattern",
                custom_err=custom_err
            )
        return match

    @staticmethod
    def min(
        field: str, 
        val: int, 
        min_val: int, 
        custom_err: str | None = None
    ) -> None:
        if val < min_val:
            Require._raise_error(
                default_err=f"Value '{field}={val}' is too small, minimal value is {min_val}",
                custom_err=custom_err
            )
    
    @staticmethod
    def max(
        field: str, 
        val: int, 
        max_val: int, 
        custom_err: str | None = None
    ) -> None:
        if val > max_val:
            Require._raise_error(
                default_err=f"Value '{field}={val}' is too big, maximum value is {max_val}",
                custom_err=custom_err
            )

    @staticmethod
    def port(
        field: str, 
        val: int, 
        custom_err: str | None = None
    ) -> None:
        min_val = 1
        max_val = 65535
        try:
            Require.type(field, val, int)
            Require.min(field, val, min_val)
            Require.max(field, val, max_val)
        except ValidationError as _:
            Require._raise_error(
                default_err=f"Value '{field}={val}' is not valid port number, value is out of range ({min_val}-{max_val})",
                custom_err=custom_err
            )

    @staticmethod
    def type(
        field: str, 
        val: object, 
        class_type: Type[T], 
        custom_err: str | None = None
    ) -> None:
        # bool is a subclass of int, but JSON true/false is never a number
        if not isinstance(val, class_type) or (class_type is int and isinstance(val, bool)):
            Require._raise_error(
                default_err=f"Value '{field}={val}' has invalid type, must be a {class_type.__name__}",
                custom_err=custom_err
            )

    @staticmethod
    def one_of(
        field: str, 
        val: str, 
        allowed_values: list[Any], 
        custom_err: str | None = None
    ) -> None:
        if val not in allowed_values:
            Require._raise_error(
                default_err=f"Value '{field}={val}' is invalid, allowed choices: {(', ').join(allowed_values)}",
                custom_err=custom_err
            )

    @staticmethod
    def _raise_error(
        default_err: str, 
        custom_err: str | None = None
    ) -> None:
        raise ValidationError(custom_err or default_err)
