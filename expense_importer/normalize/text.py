from __future__ import annotations

import re

STATUS_PAID = "Pago"
STATUS_PENDING = "Pendente"


def clean_header(h) -> str:
    return re.sub(r"\s+", " ", str(h if h is not None else "").strip())


def clean_description(s) -> str:
    v = str(s if s is not None else "").strip()
    v = re.sub(r"\s+", " ", v)
    return v


def normalize_status(value) -> str:
    """Anything mentioning "pago" counts as paid; everything else is pending."""
    if value is None:
        return STATUS_PENDING
    return STATUS_PAID if "pago" in str(value).lower() else STATUS_PENDING
