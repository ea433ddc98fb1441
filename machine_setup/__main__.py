from __future__ import annotations

from machine_setup.main import main

if __name__ == "__main__":
    raise SystemExit(main())
