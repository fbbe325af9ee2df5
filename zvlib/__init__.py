"""
ZoneVault library - Route 53 zone backup, archive, upload and restore stages.

Every stage takes an explicit BackupSession plus the boto3 client it needs
and returns a StageResult. Nothing in this package prompts the user or
imports utils.py; the interactive menu lives in zonevault.py.
"""

__version__ = "0.1.0"
