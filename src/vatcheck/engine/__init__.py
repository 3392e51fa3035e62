from .validator import CheckResult, ExtraVat, VatNumberValidator, is_valid

__all__ = ["CheckResult", "ExtraVat", "VatNumberValidator", "is_valid"]
