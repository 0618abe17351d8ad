"""
test_settings.py, but against MySQL.

The content columns declare MySQL collations (see folio.lib.fields), and
search relies on them comparing case-insensitively, so it is worth running
the suite against a real server now and then:

    pytest --ds=mysql_test_settings

A throwaway server:

docker run --rm \
    -e MYSQL_DATABASE=folio_db \
    -e MYSQL_USER=test_folio_user \
    -e MYSQL_PASSWORD=test_folio_pass \
    -e MYSQL_RANDOM_ROOT_PASSWORD=true \
    -p 3306:3306 mysql:8
"""

from test_settings import *

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.mysql",
        "NAME": "folio_db",
        "USER": "test_folio_user",
        "PASSWORD": "test_folio_pass",
        "HOST": "127.0.0.1",
        "PORT": "3306",
        "OPTIONS": {
            "charset": "utf8mb4"
        }
    }
}
