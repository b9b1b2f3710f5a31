class AuthError(Exception):
    code: int
    msg: str
    detail: str
    headers: dict[str, str]
    
    def __init__(
        self, 
        code: int, 
        msg: str, 
        detail: str | None = None,
        *,
        headers: dict[str, str] | None = None
    ) -> None:
        self.code = code
        self.msg = msg
        self.detail = detail
        self.headers = headers or {}
        super().__init__(f"{msg}: {detail}")


class AuthCredentialsMissingError(AuthError):
    REALM = "domain-cert"
    
    def __init__(self, detail: str) -> None:
        super().__init__(
            401, 
            "Login required", 
            detail, 
            headers={ "WWW-Authenticate": f'Basic realm="{self.REALM}"' }
        )


class AuthFailedError(AuthError):
    def __init__(self, detail: str) -> None:
        super().__init__(403, "Invalid username or password", detail)


class ConsoleDisabledError(AuthError):
    def __init__(self) -> None:
        super().__init__(403, "Web console is disabled", "Option 'web_enable' is set to false")
