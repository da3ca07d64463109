"""
crmforward: forward CRM entity-change events to Azure storage.

Each CRM plugin reads the changed record, projects it into a small JSON
message, and writes that message to a single Azure sink (a blob container
or a storage queue).
"""

__version__ = "0.1.0"
