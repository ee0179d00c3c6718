from .wizard_progress import WizardProgress

__all__ = ["WizardProgress"]
