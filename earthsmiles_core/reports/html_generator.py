"""
HTML Report Generator
Creates a self-contained HTML design report with the rendered views embedded
"""

import html
from pathlib import Path
from typing import Dict, List, Any, Optional
import logging

from earthsmiles_core.utils.core import DesignReport, DESIGN_UNITS
from earthsmiles_core.config.settings import (
    COLOR_SCHEME, REPORTS_DIR, VIEW_TITLES, VIEW_MODES
)

logger = logging.getLogger(__name__)

DESIGN_LABELS = {
    'diameter': 'Diameter',
    'depth': 'Depth',
    'bund_height': 'Bund Height',
    'spacing_between': 'Spacing Between',
    'structures_per_hectare': 'Structures / Hectare',
    'total_structures': 'Total Structures',
    'catchment_area': 'Catchment Area',
    'earthwork_volume': 'Earthwork Volume',
}


class HtmlReportGenerator:
    """Generate HTML design reports"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.color_scheme = COLOR_SCHEME

    def generate_report(self,
                        report: DesignReport,
                        output_folder: Optional[Path] = None) -> Path:
        """
        Write the report page

        Args:
            report: DesignReport from AppState.build_report
            output_folder: Where to save the report (REPORTS_DIR if omitted)

        Returns:
            Path to generated HTML file
        """
        if output_folder is None:
            output_folder = REPORTS_DIR

        output_folder.mkdir(parents=True, exist_ok=True)

        valid, errors = report.validate()
        if not valid:
            self.logger.warning(f"Report has validation issues: {errors}")

        html_content = self._generate_html(report)

        output_file = output_folder / "earth_smiles_report.html"
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(html_content)

        logger.info(f"Report generated: {output_file}")

        return output_file

    def _generate_findings_grid(self, design: Dict[str, Any]) -> str:
        items = []
        for key, label in DESIGN_LABELS.items():
            if key not in design:
                continue
            unit = DESIGN_UNITS.get(key, '')
            unit = '' if unit in ('count', 'per ha') else f" {unit}"
            items.append(f"""
                        <div class="finding-item">
                            <div class="finding-label">{label}</div>
                            <div class="finding-value">{design[key]}{unit}</div>
                        </div>""")
        return "".join(items)

    def _generate_table_rows(self, values: Dict[str, Any]) -> str:
        return "".join(
            f"<tr><td>{html.escape(str(key).replace('_', ' ').title())}</td>"
            f"<td>{html.escape(str(value))}</td></tr>"
            for key, value in values.items()
        )

    def _generate_recommendations_html(self, recommendations: Dict[str, List[str]]) -> str:
        blocks = []
        for group, items in recommendations.items():
            entries = "".join(
                f'<div class="recommendation-item">{html.escape(item)}</div>' for item in items
            )
            blocks.append(f"<h3>{html.escape(group.title())}</h3>{entries}")
        return "".join(blocks)

    def _generate_equations_html(self, equations: List[Dict[str, str]]) -> str:
        return "".join(
            f"<tr><td><strong>{html.escape(eq['parameter'])}</strong></td>"
            f"<td><code>{html.escape(eq['equation'])}</code></td>"
            f"<td>{html.escape(eq['description'])}</td>"
            f"<td>{html.escape(eq['source'])}</td></tr>"
            for eq in equations
        )

    def _generate_views_html(self, visualization: Dict[str, str]) -> str:
        figures = []
        for mode in VIEW_MODES:
            if mode not in visualization:
                continue
            figures.append(f"""
                <figure class="view">
                    <img src="{visualization[mode]}" alt="{VIEW_TITLES[mode]}">
                    <figcaption>{VIEW_TITLES[mode]}</figcaption>
                </figure>""")
        return "".join(figures)

    def _generate_html(self, report: DesignReport) -> str:
        """Generate complete HTML content"""
        accent = self.color_scheme['bund']
        location = html.escape(report.location_name)
        views_html = self._generate_views_html(report.visualization)
        views_section = ""
        if views_html:
            views_section = f"""
        <div class="section">
            <h2>Design Views</h2>
            <div class="views">{views_html}
            </div>
        </div>"""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(report.project)} - {location}</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            background: #f4efe9;
            color: #333;
            line-height: 1.6;
            padding: 20px;
        }}
        .container {{
            max-width: 1200px;
            margin: 0 auto;
            background: white;
            border-radius: 15px;
            box-shadow: 0 20px 60px rgba(0,0,0,0.15);
            overflow: hidden;
        }}
        .header {{
            background: {accent};
            color: white;
            padding: 40px;
            text-align: center;
        }}
        .header h1 {{ font-size: 2.2em; margin-bottom: 10px; }}
        .section {{
            background: #f8f9fa;
            margin: 30px 40px;
            padding: 25px;
            border-radius: 10px;
            border-left: 5px solid {accent};
        }}
        .section h2 {{
            color: {accent};
            margin-bottom: 20px;
            border-bottom: 2px solid {accent};
            padding-bottom: 10px;
        }}
        .findings-grid {{
            display: grid;
            grid-template-columns: repeat(4, 1fr);
            gap: 15px;
        }}
        .finding-item {{
            background: white;
            padding: 15px;
            border-radius: 8px;
            border-left: 4px solid {accent};
        }}
        .finding-label {{
            font-size: 0.85em;
            color: #666;
            text-transform: uppercase;
            letter-spacing: 1px;
        }}
        .finding-value {{ font-size: 1.4em; font-weight: bold; }}
        .data-table {{ width: 100%; border-collapse: collapse; }}
        .data-table th {{ background: {accent}; color: white; padding: 10px; text-align: left; }}
        .data-table td {{ padding: 8px 10px; border-bottom: 1px solid #ddd; }}
        .recommendation-item {{
            padding: 10px;
            margin-bottom: 8px;
            background: #f6f0ea;
            border-left: 4px solid {accent};
            border-radius: 4px;
        }}
        .views {{ display: grid; grid-template-columns: 1fr; gap: 20px; }}
        .view img {{ width: 100%; border: 1px solid #ddd; border-radius: 8px; }}
        .view figcaption {{ text-align: center; color: #666; }}
        .footer {{
            background: #f8f9fa;
            padding: 20px;
            text-align: center;
            color: #666;
            border-top: 1px solid #ddd;
            font-size: 0.9em;
        }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{html.escape(report.project)}</h1>
            <div>{location}</div>
            <div>Generated {html.escape(report.timestamp)}</div>
        </div>

        <div class="section">
            <h2>Structure Design</h2>
            <div class="findings-grid">{self._generate_findings_grid(report.design)}
            </div>
        </div>

        <div class="section">
            <h2>Site Input</h2>
            <table class="data-table">
                <tr><th>Parameter</th><th>Value</th></tr>
                {self._generate_table_rows(report.site_input)}
            </table>
        </div>

        <div class="section">
            <h2>Water Harvesting Summary</h2>
            <table class="data-table">
                <tr><th>Metric</th><th>Value</th></tr>
                {self._generate_table_rows(report.summary)}
            </table>
        </div>
{views_section}
        <div class="section">
            <h2>Recommendations</h2>
            {self._generate_recommendations_html(report.recommendations)}
        </div>

        <div class="section">
            <h2>Equations &amp; Sources</h2>
            <table class="data-table">
                <tr><th>Parameter</th><th>Equation</th><th>Description</th><th>Source</th></tr>
                {self._generate_equations_html(report.equations)}
            </table>
        </div>

        <div class="footer">
            <p>Earth Smiles Designer - model version {html.escape(report.model_version)}</p>
            <p>Dimensions adapted from WOCAT semicircular bund case studies</p>
        </div>
    </div>
</body>
</html>
"""
