"""
EARTH SMILES MAIN ORCHESTRATOR
Semicircular bund design: site inputs -> design -> rendered views -> reports
"""

import argparse
import base64
import logging
import sys
from pathlib import Path
from typing import Optional

from earthsmiles_core.session import AppState
from earthsmiles_core.reports.html_generator import HtmlReportGenerator
from earthsmiles_core.utils.core import DesignReport, ReportExporter
from earthsmiles_core.config.settings import (
    OUTPUT_DIR, LOG_LEVEL, LOG_FORMAT, SOIL_TYPES, LAND_USES,
    DEFAULT_LOCATION_NAME
)

logger = logging.getLogger(__name__)


class EarthSmilesDesigner:
    """
    Main orchestrator for a design run
    Coordinates the calculator, the renderer and report generation
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.state = AppState()
        self.html_generator = HtmlReportGenerator()
        self.report_exporter = ReportExporter()

    def design_site(self,
                    area: float,
                    slope: float,
                    rainfall: float,
                    soil_type: str = 'loamy',
                    land_use: str = 'orchard',
                    location_name: str = DEFAULT_LOCATION_NAME,
                    output_dir: Optional[Path] = None,
                    generate_images: bool = True) -> DesignReport:
        """
        Design earth smiles for a site and write all report files

        Args:
            area: Site area (ha)
            slope: Slope (%)
            rainfall: Annual rainfall (mm)
            soil_type: loamy | sandy | clay
            land_use: orchard | pasture | cropland
            location_name: Used for the report title and output folder
            output_dir: Base output folder (OUTPUT_DIR if omitted)
            generate_images: Render the three views as PNG

        Returns:
            The DesignReport that was exported

        Raises:
            ValueError: If the site input is rejected
        """
        logger.info(f"{'='*70}")
        logger.info(f"EARTH SMILES DESIGN: {location_name}")
        logger.info(f"{'='*70}")

        output_folder = (output_dir or OUTPUT_DIR) / location_name.replace(" ", "_").replace(",", "")

        try:
            self.state.set_site(area, slope)
            ok, message = self.state.calculate(rainfall, soil_type, land_use)
            if not ok:
                raise ValueError(message)

            report = self.state.build_report(location_name, include_images=generate_images)

            for mode, data_uri in report.visualization.items():
                png = base64.b64decode(data_uri.split(",", 1)[1])
                self.report_exporter.to_png(png, output_folder / f"view_{mode.replace('-', '_')}.png")

            self.report_exporter.to_json(report, output_folder / "design_report.json")
            self.report_exporter.to_csv(report, output_folder / "design_table.csv")
            self.html_generator.generate_report(report, output_folder)

            logger.info(f"✅ Design complete. Outputs in {output_folder}")
            return report

        except Exception as e:
            logger.error(f"❌ Error during design run: {str(e)}", exc_info=True)
            raise


def _print_summary(report: DesignReport) -> None:
    design = report.design
    summary = report.summary

    print("\n" + "="*70)
    print(f"EARTH SMILES DESIGN - {report.location_name}")
    print("="*70)
    print(f"  Diameter:             {design['diameter']} m")
    print(f"  Depth:                {design['depth']} m")
    print(f"  Bund height:          {design['bund_height']} m")
    print(f"  Spacing:              {design['spacing_between']} m")
    print(f"  Structures/hectare:   {design['structures_per_hectare']}")
    print(f"  Total structures:     {design['total_structures']}")
    print(f"  Catchment area:       {design['catchment_area']} m² each")
    print(f"  Earthwork volume:     {design['earthwork_volume']} m³ each")
    print(f"  Slope class:          {summary['slope_class']}")
    print(f"  Potential runoff:     {summary['potential_runoff_m3_year']} m³/year")
    print("="*70 + "\n")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Earth smile (semicircular bund) design calculator")
    p.add_argument("--area", type=float, required=True, help="Site area in hectares")
    p.add_argument("--slope", type=float, required=True, help="Slope in percent")
    p.add_argument("--rainfall", type=float, required=True, help="Annual rainfall in mm")
    p.add_argument("--soil", choices=SOIL_TYPES, default="loamy")
    p.add_argument("--land-use", choices=LAND_USES, default="orchard")
    p.add_argument("--location", default=DEFAULT_LOCATION_NAME, help="Site name for the report")
    p.add_argument("--output-dir", type=Path, default=None, help="Base folder for report files")
    p.add_argument("--no-images", action="store_true", help="Skip rendering the design views")
    return p


def main(argv=None) -> int:
    """Main execution function"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    designer = EarthSmilesDesigner()
    try:
        report = designer.design_site(
            area=args.area,
            slope=args.slope,
            rainfall=args.rainfall,
            soil_type=args.soil,
            land_use=args.land_use,
            location_name=args.location,
            output_dir=args.output_dir,
            generate_images=not args.no_images,
        )
    except ValueError as e:
        print(f"\n[ERROR] {e}")
        return 1

    _print_summary(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
