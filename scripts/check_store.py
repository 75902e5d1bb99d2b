from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modules.storage import _backend, check_connection, get_store  # noqa: E402
from rx_barcode import HISTORY_KEY, RecordStore  # noqa: E402


def main() -> None:
    ok = check_connection()
    status = "OK" if ok else "FAILED"
    print(f"Store connection {status} (backend={_backend()})")
    if ok:
        records = RecordStore(get_store()).load()
        print(f"{len(records)} record(s) under {HISTORY_KEY!r}")


if __name__ == "__main__":
    main()
