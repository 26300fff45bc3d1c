"""D-Vault reveal core: time-boxed plaintext for encrypted vault fields."""

__version__ = "0.1.0"
