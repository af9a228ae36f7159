# address_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта AddressScout.

Сериализация объекта ScrapeReport в файл.
"""
import json
from pathlib import Path

from address_scout.aggregator import ScrapeReport, results_to_dicts


def render_json(report: ScrapeReport, output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект ScrapeReport с найденными адресами
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from address_scout.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = results_to_dicts(report.results)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
