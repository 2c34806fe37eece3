from expense_importer.columns import DEFAULT_FIELD_MAP, FieldMap, match_headers, resolve_field, resolve_row

DESC = DEFAULT_FIELD_MAP.description
AMOUNT = DEFAULT_FIELD_MAP.amount


def test_exact_match_is_case_insensitive_and_trimmed():
    assert resolve_field({"  DESCRIÇÃO ": " Cimento "}, DESC) == "Cimento"


def test_exact_match_beats_earlier_substring_header():
    row = {"Descrição do item": "a", "Descrição": "b"}
    assert resolve_field(row, DESC) == "b"


def test_candidate_order_decides_between_exact_matches():
    row = {"desc": "short", "description": "long"}
    assert resolve_field(row, DESC) == "long"


def test_substring_fallback():
    assert resolve_field({"Valor Total (R$)": "10,00"}, AMOUNT) == "10,00"


def test_empty_cells_do_not_match():
    row = {"Valor": "", "Valor pago": "5,00"}
    assert resolve_field(row, AMOUNT) == "5,00"
    assert resolve_field({"Valor": None}, AMOUNT) == ""
    assert resolve_field({"Valor": float("nan")}, AMOUNT) == ""


def test_no_match_is_empty_string():
    assert resolve_field({"Fornecedor": "ACME"}, AMOUNT) == ""


def test_numbers_are_returned_unchanged():
    assert resolve_field({"Valor": 2.5}, AMOUNT) == 2.5


def test_resolution_is_idempotent():
    row = {"Vencimento": "20/12/2024", "Descrição": "Cimento", "Valor": "35,00", "Status": "Pago"}
    assert resolve_row(row) == resolve_row(row)
    assert resolve_row(row) == {
        "description": "Cimento",
        "amount": "35,00",
        "dueDate": "20/12/2024",
        "status": "Pago",
    }


def test_custom_field_map():
    fm = FieldMap(description=("item",))
    assert resolve_row({"Item": "Tijolo"}, fm)["description"] == "Tijolo"


def test_match_headers():
    m = match_headers(["Vencimento", "Descrição", "Valor", "Status"])
    assert m.headers == {
        "description": "Descrição",
        "amount": "Valor",
        "dueDate": "Vencimento",
        "status": "Status",
    }
    assert m.reasons == []


def test_match_headers_reports_missing_fields():
    m = match_headers(["Descrição", "Preço unitário"])
    assert m.headers["amount"] == "Preço unitário"
    assert m.unresolved == ["dueDate", "status"]
    assert len(m.reasons) == 2


def test_whitespace_only_cell_still_claims_the_header():
    row = {"Valor": "   ", "Valor pago": "5,00"}
    assert resolve_field(row, AMOUNT) == ""
