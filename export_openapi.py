import json
import sys
from pathlib import Path

from ipinfo_client.main import app  # tester service

DEFAULT_OUT_PATH = Path("openapi") / "ipinfo-tester.json"


def main(out_path: Path = DEFAULT_OUT_PATH) -> None:
    """Write the tester service's OpenAPI schema to `out_path`."""
    schema = app.openapi()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(schema, indent=2, sort_keys=True))
    print(f"Wrote {out_path}")  # noqa: T201


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUT_PATH)
