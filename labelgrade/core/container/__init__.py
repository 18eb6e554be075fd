__all__ = ["BootConfiguration", "LabelgradeContainer"]


from .labelgrade import BootConfiguration, LabelgradeContainer
