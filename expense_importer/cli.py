from __future__ import annotations

import argparse

from expense_importer.columns import match_headers
from expense_importer.convert import prepare_import, run_import
from expense_importer.logging_setup import configure_logging
from expense_importer.normalize.io import load_rows
from expense_importer.settings import ImporterSettings
from expense_importer.submit import ExpenseApiClient, ImportSubmissionError
from expense_importer.template import write_template


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="expense-import")
    parser.add_argument("--log-level", default=None, help="Override EXPENSE_IMPORT_LOG_LEVEL")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_detect = sub.add_parser("detect", help="Show which column feeds each expense field")
    p_detect.add_argument("input", help="Path to .xlsx, .xls or .csv")

    p_preview = sub.add_parser("preview", help="Parse the spreadsheet and count usable rows")
    p_preview.add_argument("input", help="Path to .xlsx, .xls or .csv")
    p_preview.add_argument("--report", required=False, help="Path to output JSON report")

    p_import = sub.add_parser("import", help="Parse the spreadsheet and create the expenses")
    p_import.add_argument("input", help="Path to .xlsx, .xls or .csv")
    p_import.add_argument("--api-url", required=False, help="Expense API base URL")
    p_import.add_argument("--token", required=False, help="Bearer access token")
    p_import.add_argument("--project", required=False, help="Project id for the new expenses")
    p_import.add_argument("--concurrency", type=int, required=False, help="Max calls in flight")
    p_import.add_argument("--report", required=False, help="Path to output JSON report")

    p_template = sub.add_parser("template", help="Write an example spreadsheet")
    p_template.add_argument("--out", required=True, help="Path to .xlsx or .csv output")

    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    if args.cmd == "detect":
        lr = load_rows(args.input)
        m = match_headers(lr.df.columns)
        for name, header in m.headers.items():
            print(f"{name}={header if header is not None else '-'}")
        if m.reasons:
            print("reasons:")
            for r in m.reasons:
                print(f" - {r}")
        return 0

    if args.cmd == "preview":
        _, rep = prepare_import(args.input)
        if args.report:
            with open(args.report, "w", encoding="utf-8") as f:
                f.write(rep.to_json())
        print(rep.to_json())
        return 0

    if args.cmd == "import":
        overrides = {
            "api_base_url": args.api_url,
            "access_token": args.token,
            "project_id": args.project,
            "max_concurrency": args.concurrency,
        }
        settings = ImporterSettings().model_copy(update={k: v for k, v in overrides.items() if v is not None})
        with ExpenseApiClient.from_settings(settings) as client:
            try:
                rep = run_import(
                    args.input,
                    client,
                    concurrency=settings.max_concurrency,
                    report_path=args.report,
                )
            except ImportSubmissionError as e:
                print(f"error: {e}")
                return 1
        print(rep.to_json())
        return 0

    if args.cmd == "template":
        print(write_template(args.out))
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
