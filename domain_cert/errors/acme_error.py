from typing import Sequence

class AcmeShError(Exception):
    cmd: Sequence[str]
    return_code: int
    output: str
    
    def __init__(
        self,
        *,
        cmd: Sequence[str],
        return_code: int,
        output: str
    ) -> None:
        self.cmd = cmd
        self.return_code = return_code
        self.output = output
        super().__init__(f"Command exited with status {return_code}: {' '.join(cmd)}")
