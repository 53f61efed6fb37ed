"""Templating — discovery, naming, and kida integration.

Templates are discovered once at startup into an immutable
:class:`~wren.templating.registry.TemplateRegistry`; request handlers
only ever read from it.
"""
