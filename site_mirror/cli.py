# === FILE: site_mirror/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteMirror через командную строку.

Команды:
  mirror    Зеркалировать сайт по конфигу и вывести/сохранить отчёт
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Журнал запуска (override log_file из конфига)
  --log-format FORMAT Формат консольного лога

Команда mirror опции:
  --host HOST             Хост сайта (override host)
  --protocol http|https   Протокол (override protocol)
  --output DIR            Корень зеркала (override output_dir)
  --concurrency INT       Число одновременных загрузок (override concurrency)
  --seeds PATH            Файл с дополнительными стартовыми ссылками
  --json PATH             Сохранить JSON-отчёт в файл
  --pretty                Преформатировать JSON-вывод (отступ 2)
  --mirror-timeout SEC    Таймаут всего зеркалирования (секунд)

Дополнительно:
  --version, -v       Показать версию SiteMirror

Пример:
  site-mirror --config configs/default.yaml mirror --output public --json report.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_mirror import __version__
from site_mirror.config import load_config
from site_mirror.engine import start_mirror
from site_mirror.logger import init_logging
from site_mirror.report.json_report import render_json
from site_mirror.utils import read_url_list, remove_duplicates

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
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
    help='Журнал запуска (по умолчанию log_file из конфига)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для консольных логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteMirror CLI."""
    init_logging(level=log_level, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if log_file is not None:
        cfg = cfg.model_copy(update={'log_file': log_file})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('mirror', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Хост сайта (override host)')
@click.option(
    '--protocol', default=None,
    type=click.Choice(['http', 'https']),
    help='Протокол сайта (override protocol)'
)
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Корень локального зеркала (override output_dir)'
)
@click.option(
    '--concurrency', type=click.IntRange(min=1), default=None,
    help='Число одновременных загрузок (override concurrency)'
)
@click.option(
    '--seeds', 'seeds_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Файл с дополнительными стартовыми ссылками, по одной на строку'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--mirror-timeout', 'mirror_timeout',
    type=float,
    default=None,
    help='Таймаут всего зеркалирования (секунд)'
)
@click.pass_context
def mirror(ctx, host, protocol, output_dir, concurrency, seeds_file, json_output, pretty,
           mirror_timeout):
    """Зеркалировать сайт и вывести сводку."""
    cfg = ctx.obj['config']
    overrides = {
        'host': host,
        'protocol': protocol,
        'output_dir': output_dir,
        'concurrency': concurrency,
    }
    update = {k: v for k, v in overrides.items() if v is not None}
    if seeds_file is not None:
        try:
            extra = read_url_list(seeds_file)
        except Exception as e:
            print_error(f'Ошибка чтения списка ссылок: {e}')
        update['other_urls'] = remove_duplicates([*cfg.other_urls, *extra])
    if update:
        try:
            # model_copy skips validation, so rebuild the model
            cfg = type(cfg)(**{**cfg.model_dump(), **update})
        except Exception as e:
            print_error(f'Ошибка в параметрах: {e}')

    try:
        if mirror_timeout:
            report = asyncio.run(
                asyncio.wait_for(start_mirror(cfg), timeout=mirror_timeout)
            )
        else:
            report = asyncio.run(start_mirror(cfg))
    except asyncio.TimeoutError:
        print_error(f'Зеркалирование не завершено за {mirror_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при зеркалировании: {e}')

    # Если не сохраняем в файл — печатаем сводку в stdout
    if not json_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(report.summary(), ensure_ascii=False, indent=indent))
        return

    try:
        saved_json = render_json(report, json_output, pretty=pretty)
        click.echo(f"JSON report: {saved_json}")
    except Exception as e:
        print_error(f"Ошибка при сохранении JSON: {e}")


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


# expose these names at module level for test monkey-patching
cli.start_mirror = start_mirror
cli.render_json = render_json

if __name__ == "__main__":
    cli()
