"""
Hospital Charges - pooled stored-procedure data access.

Retrieves published inpatient (DRG) and outpatient (APC) hospital-charge data
through MySQL stored procedures and composes provider comparisons for the
presentation tier.
"""

__version__ = "0.1.0"
