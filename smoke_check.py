#!/usr/bin/env python3
"""Wrapper so ``python smoke_check.py`` keeps working from the repo root.

Prefer:
  python run_all_qa.py
  python -m msc.qa.smoke_check
"""

from msc.qa.smoke_check import main

if __name__ == "__main__":
    main()
