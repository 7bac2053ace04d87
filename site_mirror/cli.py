# === FILE: site_mirror/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteMirror через командную строку.

Команды:
  mirror    Зеркалировать сайт в каталог и вывести/сохранить отчёт
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязателен)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stdout, если не указан)
  --log-format FORMAT Формат логирования

Опции mirror/config:
  --url, -u URL       Стартовый URL
  --dest, -d DIR      Каталог назначения
  --timeout SEC       Таймаут одного HTTP-запроса
  --concurrency INT   Лимит одновременных запросов на уровне
  --user-agent TEXT   Заголовок User-Agent
  --strict-status     Не сохранять ответы со статусом не 2xx

Команда mirror опции:
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)

Дополнительно:
  --version, -v       Показать версию SiteMirror

Пример:
  site-mirror mirror -u https://blog.cleancoder.com -d saved --json report.json
"""
import asyncio
import sys
from functools import wraps
from pathlib import Path

import click
from pydantic import ValidationError

from site_mirror import __version__
from site_mirror.config import build_config
from site_mirror.engine import start_mirror
from site_mirror.logger import DEFAULT_FORMAT, init_logging
from site_mirror.report.html_report import render_html
from site_mirror.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def mirror_options(func):
    """Опции, из которых собирается MirrorConfig (перекрывают значения из файла)."""
    @click.option('--url', '-u', 'start_url', default=None, help='Стартовый URL')
    @click.option(
        '--dest', '-d', 'dest_dir',
        default=None,
        type=click.Path(file_okay=False, path_type=Path),
        help='Каталог назначения'
    )
    @click.option('--timeout', type=float, default=None, help='Таймаут одного HTTP-запроса (секунд)')
    @click.option(
        '--concurrency', 'max_concurrency',
        type=click.IntRange(min=1), default=None,
        help='Лимит одновременных запросов на уровне (без лимита, если не указан)'
    )
    @click.option('--user-agent', 'user_agent', default=None, help='Заголовок User-Agent')
    @click.option(
        '--strict-status', 'strict_status', is_flag=True,
        help='Считать ответы со статусом не 2xx ошибкой и не сохранять их'
    )
    @click.pass_context
    @wraps(func)
    def wrapper(ctx, start_url, dest_dir, timeout, max_concurrency, user_agent, strict_status, **kwargs):
        try:
            cfg = build_config(
                ctx.obj['config_path'],
                start_url=start_url,
                dest_dir=dest_dir,
                timeout=timeout,
                max_concurrency=max_concurrency,
                user_agent=user_agent,
                save_error_pages=False if strict_status else None,
            )
        except (ValidationError, OSError, ValueError, TypeError) as e:
            print_error(f'Ошибка загрузки конфигурации: {e}')
        return func(cfg, **kwargs)
    return wrapper


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteMirror CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('mirror', context_settings=CONTEXT_SETTINGS)
@mirror_options
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном (встроенный шаблон, если не указана)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
def mirror(cfg, json_output, html_output, template_dir, pretty):
    """Зеркалировать сайт и сгенерировать отчёты."""
    try:
        report = asyncio.run(start_mirror(cfg, install_signal_handlers=True))
    except Exception as e:
        print_error(f'Ошибка при зеркалировании: {e}')

    # Если не сохраняем в файл, печатаем в stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@mirror_options
def show_config(cfg):
    """Показать итоговую конфигурацию в JSON."""
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
