"""VerifierConfig — deployment settings for the verifier.

Every field has a default matching the reference deployment, so an empty
config file (or none at all) yields a working verifier.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_HEX_COLOR_LENGTHS = (4, 7, 9)


class QROptions(BaseModel):
    """Rendering options for the request QR code.

    Parameters
    ----------
    width:
        Target image width in pixels.
    margin:
        Quiet-zone width in modules.
    dark:
        Foreground colour as ``#rgb``, ``#rrggbb`` or ``#rrggbbaa``.
    light:
        Background colour, same formats as *dark*.
    """

    width: int = Field(default=300, gt=0)
    margin: int = Field(default=2, ge=0)
    dark: str = "#000000"
    light: str = "#FFFFFF"

    @field_validator("dark", "light")
    @classmethod
    def _check_color(cls, value: str) -> str:
        if not value.startswith("#") or len(value) not in _HEX_COLOR_LENGTHS:
            raise ValueError(f"Colour must be a hex string like '#000000', got {value!r}")
        int(value[1:], 16)
        return value


class VerifierConfig(BaseModel):
    """Verifier deployment settings.

    Parameters
    ----------
    display_name:
        Verifier name shown on the holder's device.
    logo_ref:
        Logo reference shown on the holder's device.
    dev_mode:
        Forwarded to the capability. Does not relax verdicts.
    minimum_age:
        Inclusive age threshold for age verification.
    qr:
        QR rendering options.
    issuer_url:
        Base URL of the downstream issuer flow, if any.
    """

    display_name: str = "Web5 Claims Identity Verifier"
    logo_ref: str = "https://zkpassport.id/logo.png"
    dev_mode: bool = False
    minimum_age: int = Field(default=18, ge=0)
    qr: QROptions = Field(default_factory=QROptions)
    issuer_url: Optional[str] = None


def load_config(path: Optional[Path] = None) -> VerifierConfig:
    """Load a :class:`VerifierConfig` from a JSON file.

    Parameters
    ----------
    path:
        JSON file to read. ``None`` returns the defaults.

    Raises
    ------
    FileNotFoundError
        If *path* is given but does not exist.
    pydantic.ValidationError
        If the file content does not match the schema.
    """
    if path is None:
        return VerifierConfig()
    return VerifierConfig.model_validate_json(path.read_text(encoding="utf-8"))
