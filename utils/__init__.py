"""Library CLI - helper package

- Input validation (validators.py)
- Output rendering for plain/json/rich modes (ui_helpers.py)
"""
