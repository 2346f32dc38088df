# site_mirror/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteMirror.

Сериализация объекта MirrorReport в файл.
"""
import json
from dataclasses import asdict
from pathlib import Path

from site_mirror.aggregator import MirrorReport


def render_json(report: MirrorReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект MirrorReport с итогами зеркалирования
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_mirror.report.json_report import render_json
    report_path = render_json(report, 'reports/mirror.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = asdict(report)
    data["summary"] = report.summary()

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
