# === FILE: address_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска AddressScout через командную строку.

Команды:
  scrape    Собрать адреса с целевых страниц и их скриптов
  config    Показать текущую конфигурацию
  serve     Запустить HTTP API

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию встроенные значения)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (иначе только stderr)
  --log-format FORMAT Формат логирования

Команда scrape опции:
  --json PATH             Сохранить JSON-отчёт в файл
  --html PATH             Сохранить HTML-отчёт в файл
  --template DIR          Папка с Jinja2-шаблонами
  --pretty                Преформатировать JSON-вывод (отступ 2)
  --scrape-timeout SEC    Таймаут всего скрейпинга (секунд)

Дополнительно:
  --version, -v       Показать версию AddressScout

Пример:
  address-scout scrape https://example.com https://example.org --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from address_scout import __version__
from address_scout.config import ScraperConfig, load_config
from address_scout.engine import Engine
from address_scout.logger import DEFAULT_FORMAT, init_logging
from address_scout.report.html_report import render_html
from address_scout.report.json_report import render_json
from address_scout.server import run_server
from address_scout.utils import is_http_url

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='AddressScout, version %(version)s')
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
    help='Путь к файлу логов (иначе только stderr)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд AddressScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    if config_path is None:
        cfg = ScraperConfig()
    else:
        try:
            cfg = load_config(config_path)
        except Exception as e:
            print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scrape', context_settings=CONTEXT_SETTINGS)
@click.argument('targets', nargs=-1, required=True)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию шаблоны пакета)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--scrape-timeout', 'scrape_timeout',
    type=float,
    default=None,
    help='Таймаут всего скрейпинга (секунд)'
)
@click.pass_context
def scrape(ctx, targets, json_output, html_output, template_dir, pretty, scrape_timeout):
    """Собрать адреса с TARGETS и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    invalid = [t for t in targets if not is_http_url(t)]
    if invalid:
        print_error(f"Все цели должны начинаться с 'http://' или 'https://': {', '.join(invalid)}")

    try:
        report = Engine(cfg).start_scrape(targets, timeout=scrape_timeout)
    except asyncio.TimeoutError:
        print_error(f'Скрейпинг не завершён за {scrape_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при скрейпинге: {e}')

    # Если не сохраняем в файл, печатаем в stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output)
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
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(json.dumps(cfg.model_dump(mode='json'), ensure_ascii=False, indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='0.0.0.0', show_default=True, help='Адрес для HTTP API')
@click.option('--port', default=8080, show_default=True, type=int, help='Порт для HTTP API')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP API (/ping, /scrape)."""
    run_server(ctx.obj['config'], host=host, port=port)


if __name__ == "__main__":
    cli()
