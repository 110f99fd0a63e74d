# WSGI (Web Server Gateway Interface) configuration for production deployment
#
# Used by production servers like:
# - Gunicorn: gunicorn config.wsgi:application --bind 0.0.0.0:8000 --workers 4
# - uWSGI:    uwsgi --http :8000 --module config.wsgi:application
#
# Set in production:
#    - DEBUG=False
#    - SECRET_KEY=<random-value>
#    - ALLOWED_HOSTS=yourdomain.com
#    - SUPABASE_URL / SUPABASE_KEY
# ==============================================================================

import os
from django.core.wsgi import get_wsgi_application

# Set the default Django settings module
# Points to config/settings.py
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()
