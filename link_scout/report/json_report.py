# link_scout/report/json_report.py
"""
JSON-отчёт LinkScout: ссылки, разбивка на страницы/файлы, счётчики запуска.
"""
import json
from pathlib import Path
from typing import Any, Dict, Union

from link_scout.aggregator import ScanReport


def report_payload(report: ScanReport) -> Dict[str, Any]:
    """Словарь, который попадает в файл; ключи в фиксированном порядке."""
    return {
        'seeds': report.seeds,
        'links': report.links,
        'pages': report.pages,
        'assets': report.assets,
        'stats': dict(report.stats),
        'dropped': dict(sorted(report.dropped.items())),
    }


def render_json(report: ScanReport, output_path: Union[Path, str]) -> Path:
    """
    Пишет отчёт в ``output_path`` (UTF-8, отступ 2) и возвращает путь.

    Пример:
    ```python
    render_json(aggregate_results(result), 'reports/links.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps(report_payload(report), ensure_ascii=False, indent=2) + '\n',
        encoding='utf-8',
    )
    return output
