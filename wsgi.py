# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── storefront/      <- Paquete Python
#       ├── main.py      <- create_app()
#       ├── routes/
#       ├── services/
#       └── repositories/
#
# La configuración sale del entorno (o de .env), ver storefront/config.py.
# ==============================================================================

from storefront.main import create_app

app = create_app()

# Para desarrollo local:
#   python wsgi.py
if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
