"""Shared fixtures.

Dates that fall back to "today" are pinned through the ``today`` argument so
assertions do not depend on the clock. Logging configured by CLI tests is
undone after each test so later tests do not write to a closed capture
stream.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from expense_importer import logging_setup


@pytest.fixture
def today() -> date:
    return date(2025, 1, 15)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("expense_importer")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False


@pytest.fixture
def template_rows():
    return [
        {"Vencimento": "20/12/2024", "Descrição": "Cimento 50kg", "Valor": "35,00", "Status": "Pendente"},
        {"Vencimento": "25/12/2024", "Descrição": "Pintura externa", "Valor": "1500,00", "Status": "Pago"},
        {"Vencimento": "30/12/2024", "Descrição": "Areia para construção", "Valor": "250,00", "Status": "Pendente"},
    ]
