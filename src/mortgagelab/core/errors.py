"""
Error classes for MortgageLab.

Calculators never raise on degenerate numbers; they coerce to zero and return
empty results. Exceptions are reserved for configuration problems.
"""


class ConfigError(Exception):
    """
    Configuration error while loading or validating a policy handbook.

    **Common Causes:**
    - Handbook file that is not a mapping at its root
    - Non-numeric haircut or DSR limit values
    - Bank entries without an ``id``
    - Unsupported file format (only YAML and JSON are read)

    **Example Usage:**
        ```python
        from mortgagelab.core.errors import ConfigError
        from mortgagelab.core.handbook import load_handbook

        try:
            handbook = load_handbook("handbook.yaml")
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```
    """

    pass
