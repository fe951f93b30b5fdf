# ==============================================================================
# STOREFRONT - Tienda con checkout por WhatsApp y panel de administración
# ==============================================================================

__version__ = '1.0.0'
