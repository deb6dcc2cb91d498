"""GST invoicing and quotation backend."""

# Expose package modules for easier imports
__all__ = [
    'calculations',
    'catalog',
    'database',
    'formatting',
    'main',
    'numbering',
    'repository',
    'routes',
    'schemas',
    'validation',
]
