"""The {data, meta} envelope wrapping every controller response."""

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

T = TypeVar("T")

RC_OK = "ok"
RC_ERROR = "error"

# meta.msg sent with a 401 once the session cookie has expired
LOGIN_REQUIRED = "api.err.LoginRequired"


class EnvelopeMeta(BaseModel):
    """Result code and optional message of a controller response."""

    model_config = ConfigDict(extra="ignore")

    rc: str
    msg: Optional[str] = None


class Envelope(BaseModel):
    """Decoded controller response.

    ``data`` is only meaningful when ``meta.rc`` is ``"ok"``. On failure the
    payload is left undecoded and ``meta.msg`` identifies the error.
    """

    model_config = ConfigDict(extra="ignore")

    data: Any = None
    meta: EnvelopeMeta = Field(..., description="Result code and message")

    @property
    def ok(self) -> bool:
        return self.meta.rc == RC_OK

    @property
    def login_required(self) -> bool:
        return self.meta.rc == RC_ERROR and self.meta.msg == LOGIN_REQUIRED

    def payload(self, shape: Type[T]) -> T:
        """Validate ``data`` against the caller's expected shape.

        Raises:
            pydantic.ValidationError: ``data`` does not match ``shape``.
        """
        return TypeAdapter(shape).validate_python(self.data)
