from typing import Optional

from pydantic import BaseModel, model_validator


class ProbeResult(BaseModel):
    """
    Outcome of one ping invocation: raw stdout on success, an error
    description when the process could not be run.
    """

    address: str
    output: Optional[bytes] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self):
        if (self.output is None) == (self.error is None):
            raise ValueError("ProbeResult needs exactly one of output or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, address: str, output: bytes) -> "ProbeResult":
        return cls(address=address, output=output)

    @classmethod
    def failure(cls, address: str, error: str) -> "ProbeResult":
        return cls(address=address, error=error)
