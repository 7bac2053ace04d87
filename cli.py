# cli.py

"""
Точка входа для запуска SiteMirror из корня репозитория без установки пакета.

Пример запуска:
    python cli.py mirror -u https://blog.cleancoder.com -d saved
"""
from site_mirror.cli import cli

if __name__ == '__main__':
    cli()
