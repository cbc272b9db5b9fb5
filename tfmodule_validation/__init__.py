"""
Terraform module validation

Applies the App Service Plan example modules, reads back what they deployed
through the Azure management SDKs, and compares plans, metric alert rules
and autoscale settings against fixed expectations.
"""

__version__ = "0.1.0"
