#!/usr/bin/env python3
"""
Точка входа для запуска LinkScout через командную строку.

Команды:
  scan      Обойти сайт(ы) от стартовых URL и вывести/сохранить найденные ссылки
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязательно)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда scan опции:
  START_URLS...               Стартовые URL (иначе из конфига или START_URL)
  --same-domain/--any-domain  Ограничиться хостами стартовых URL
  --limit INT                 Лимит числа запросов (max_requests_per_crawl)
  --concurrency INT           Число параллельных воркеров
  --renderer [http|browser]   Загрузка страниц: aiohttp или Playwright
  --headful                   Показывать окно браузера
  --wait-until STATE          Условие готовности страницы
  --json PATH                 Сохранить JSON-отчёт в файл
  --html PATH                 Сохранить HTML-отчёт в файл
  --template DIR              Папка с Jinja2-шаблонами
  --pretty                    Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC          Таймаут всего обхода (секунд)

Пример:
  link_scout scan https://example.com/dubai/ --limit 100 --json links.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from link_scout import __version__
from link_scout.aggregator import aggregate_results
from link_scout.config import build_config
from link_scout.logger import init_logging
from link_scout.report.html_report import render_html
from link_scout.report.json_report import render_json
from link_scout.scanner import start_scan

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _load(ctx, overrides=None):
    try:
        return build_config(ctx.obj['config_path'], overrides)
    except ValidationError as e:
        print_error(f'Ошибка конфигурации: {e}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkScout, version %(version)s')
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд LinkScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.argument('start_urls', nargs=-1)
@click.option(
    '--same-domain/--any-domain', 'same_domain_only',
    default=None,
    help='Оставаться на хостах стартовых URL (по умолчанию да)'
)
@click.option('--limit', '-l', 'limit', type=click.IntRange(min=1), default=None,
              help='Макс. число запросов за обход')
@click.option('--concurrency', type=click.IntRange(min=1), default=None,
              help='Число параллельных воркеров')
@click.option('--renderer', type=click.Choice(['http', 'browser']), default=None,
              help='Загрузка страниц: aiohttp (http) или Playwright (browser)')
@click.option('--headful', is_flag=True, default=None, help='Показывать окно браузера')
@click.option('--wait-until', 'wait_until',
              type=click.Choice(['load', 'domcontentloaded', 'networkidle']), default=None,
              help='Условие готовности страницы (browser)')
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
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--scan-timeout', 'scan_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def scan(ctx, start_urls, same_domain_only, limit, concurrency, renderer, headful, wait_until,
         json_output, html_output, template_dir, pretty, scan_timeout):
    """Обойти сайт(ы) и вывести найденные ссылки."""
    cfg = _load(ctx, {
        'start_urls': list(start_urls),
        'same_domain_only': same_domain_only,
        'max_requests_per_crawl': limit,
        'max_concurrency': concurrency,
        'renderer': renderer,
        'headless': False if headful else None,
        'wait_until': wait_until,
    })
    click.echo(f'Starting scan: {", ".join(cfg.start_urls)}', err=True)
    try:
        if scan_timeout:
            result = asyncio.run(asyncio.wait_for(start_scan(cfg), timeout=scan_timeout))
        else:
            result = asyncio.run(start_scan(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    report = aggregate_results(result)

    # без файлов отчёта ссылки идут в stdout
    if not json_output and not html_output:
        click.echo(json.dumps(report.links, ensure_ascii=False, indent=2 if pretty else None))
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
@click.argument('start_urls', nargs=-1)
@click.pass_context
def show_config(ctx, start_urls):
    """Показать итоговую конфигурацию в JSON."""
    cfg = _load(ctx, {'start_urls': list(start_urls)})
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
