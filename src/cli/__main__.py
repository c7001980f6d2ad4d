# src/cli/__main__.py
import sys, json
from pathlib import Path

USAGE = """Usage:
  python -m src.cli price <quote.json> [--out=result.json]
  python -m src.cli number

<quote.json> holds {"rows": [...], "meta": {...}} as posted by the quote builder.

Examples:
  python -m src.cli price examples/quote_input.json
  python -m src.cli price examples/quote_input.json --out=priced.json
  python -m src.cli number
"""

def _load_json(p: str):
    try:
        return json.loads(Path(p).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error reading JSON '{p}': {e}", file=sys.stderr)
        sys.exit(2)

def _price(argv):
    if not argv:
        print(USAGE, file=sys.stderr); sys.exit(1)

    from src.services.pricing import price_quote

    quote_path = argv[0]
    out_path = None
    for arg in argv[1:]:
        if arg.startswith("--out="):
            out_path = arg.split("=", 1)[1]

    data = _load_json(quote_path)
    if isinstance(data, list):
        data = {"rows": data}
    if not isinstance(data, dict):
        print("Expected a JSON object with rows and meta", file=sys.stderr)
        sys.exit(2)

    result = price_quote(data.get("rows") or [], data.get("meta") or {})
    text = json.dumps(result, indent=2, ensure_ascii=False)
    if out_path:
        Path(out_path).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")

def _number():
    from sqlmodel import Session

    from src.server.db.session import engine, init_db
    from src.services.numbering import peek_quote_no

    init_db()
    with Session(engine) as session:
        print(peek_quote_no(session))

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(USAGE, file=sys.stderr); sys.exit(1)

    cmd = argv[0].lower()

    if cmd == "price":
        _price(argv[1:])
        return

    if cmd == "number":
        _number()
        return

    print(USAGE, file=sys.stderr); sys.exit(1)

if __name__ == "__main__":
    main()
