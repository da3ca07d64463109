"""Azure plugin pack for crmforward.

Provides sinks for Azure Blob Storage and Azure Queue Storage, both
authenticated with a storage account name and access key.

Sinks are accessed via PluginManager, not direct imports:
    manager = PluginManager()
    manager.register_builtin_plugins()
    blob_sink = manager.get_sink_by_name("azure_blob")
    queue_sink = manager.get_sink_by_name("azure_queue")
"""
