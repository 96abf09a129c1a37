# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# Este archivo es el punto de entrada para servidores WSGI como Gunicorn.
#
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/                <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py               <- Este archivo
#   ├── pyproject.toml
#   └── inventory_tracker/    <- Paquete Python
#       ├── __init__.py
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# La configuración se lee de variables de entorno (ver config.py).
# ==============================================================================

from inventory_tracker.app_container import get_container
from inventory_tracker.main import create_app

app = create_app(container=get_container())

# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================
# Para desarrollo local:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
