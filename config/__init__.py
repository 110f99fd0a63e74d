# ==============================================================================
# AURIA ADMIN - CONFIG PACKAGE
# ==============================================================================
# settings.py  - environment driven settings (python-decouple)
# urls.py      - root URL configuration
# wsgi.py/asgi.py - server entry points
