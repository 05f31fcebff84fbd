import json
import re
import tempfile
import unittest
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import pandas as pd

from pipeplanner import PipePlanner
from pipeplanner.utils import (
    PatternReporter, PatternVisualizer, create_visualization, export_report, usable_offcuts
)


class ReportTestCase(unittest.TestCase):

    def setUp(self):
        self.report = PipePlanner().optimize_pipes(
            length=6.0,
            requirements=[(1.5, 5), (2.2, 3)],
            max_count=10,
            job_name="Guarda-corpo <térreo>",
        )
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.out = Path(self.tmp.name)


class TestPatternReporter(ReportTestCase):

    def test_text_report(self):
        text = PatternReporter(self.report).generate_text_report()

        self.assertIn("RELATÓRIO DE OTIMIZAÇÃO DE CORTES", text)
        self.assertIn("Barras Utilizadas: 3 de 10", text)
        self.assertIn("Peças Alocadas: 8 de 8", text)
        self.assertIn("Barra 3:", text)
        self.assertNotIn("não couberam", text)

    def test_text_report_flags_unplaced(self):
        report = PipePlanner().optimize_pipes(length=5.0, requirements=[(3, 2)], max_count=1, kerf_width=0)
        text = PatternReporter(report).generate_text_report()
        self.assertIn("1 peça(s) não couberam", text)

    def test_csv_report(self):
        base = self.out / "plano"
        PatternReporter(self.report).generate_csv_report(str(base))

        patterns = pd.read_csv(f"{base}_padroes.csv")
        segments = pd.read_csv(f"{base}_segmentos.csv")

        self.assertEqual(list(patterns["Barra"]), [1, 2, 3])
        self.assertEqual(patterns["Peças"].sum(), 8)
        self.assertEqual(len(segments), 11)
        self.assertEqual(segments["Sobra"].sum(), 3)

    def test_json_report(self):
        path = self.out / "plano.json"
        PatternReporter(self.report).generate_json_report(str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(data["jobName"], "Guarda-corpo <térreo>")
        self.assertEqual(data["metrics"]["stockUsed"], 3)
        self.assertIs(data["patterns"][0]["segments"][-1]["isWaste"], True)

    def test_html_report_escapes_job_name(self):
        html = PatternReporter(self.report).generate_html_report(str(self.out / "plano.html"))

        self.assertIn("Guarda-corpo &lt;térreo&gt;", html)
        self.assertEqual(html.count('class="waste"'), 3)
        self.assertTrue((self.out / "plano.html").exists())

    def test_html_bars_keep_kerf_gaps(self):
        html = PatternReporter(self.report).generate_html_report(str(self.out / "plano.html"))

        bars = re.findall(r'<div class="bar">(.*?)</div></div>', html)
        self.assertEqual(len(bars), 3)
        for bar in bars:
            spans = re.findall(r'margin-left: ([\d.]+)%; width: ([\d.]+)%', bar)
            total = sum(float(gap) + float(width) for gap, width in spans)
            self.assertAlmostEqual(total, 100.0, delta=0.05)

        # Segunda peça da barra 1 começa depois de 3mm de corte: 0.003 / 6 = 0.05%
        self.assertIn('margin-left: 0.05%; width: 36.67%', bars[0])

    def test_usable_offcuts(self):
        offcuts = usable_offcuts(self.report)
        self.assertEqual([p.bar_index for p in offcuts], [2, 3])


class TestExports(ReportTestCase):

    def test_export_report(self):
        files = export_report(self.report, str(self.out / "saida"))
        names = {f.name for f in files}

        self.assertIn("relatorio_pipeplanner.txt", names)
        self.assertIn("relatorio_pipeplanner.json", names)
        self.assertIn("relatorio_pipeplanner.html", names)
        self.assertIn("relatorio_pipeplanner_padroes.csv", names)
        self.assertIn("relatorio_pipeplanner_segmentos.csv", names)

    def test_export_selected_formats(self):
        files = export_report(self.report, str(self.out), formats=["txt"])
        self.assertEqual([f.name for f in files], ["relatorio_pipeplanner.txt"])

    def test_create_visualization(self):
        files = create_visualization(self.report, str(self.out))
        self.assertEqual(
            [f.name for f in files],
            ["visualizacao_pipeplanner_barras.png", "visualizacao_pipeplanner_resumo.png"],
        )

    def test_visualizer_without_patterns(self):
        report = PipePlanner().optimize_pipes(length=6.0, requirements=[], max_count=2)
        visualizer = PatternVisualizer(report)

        visualizer.plot_patterns(str(self.out / "vazio.png"), show=False)
        visualizer.create_summary_chart(str(self.out / "resumo.png"), show=False)

        self.assertFalse((self.out / "vazio.png").exists())
        self.assertTrue((self.out / "resumo.png").exists())


if __name__ == '__main__':
    unittest.main()
