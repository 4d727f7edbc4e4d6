"""Certificate wording, paragraph layout and PDF output."""

import pytest
import requests

from certificates import generator as G
from certificates import layout as L
from data import records as R


def _opts(**overrides) -> L.CertificateOptions:
    return L.CertificateOptions(**{**L.sample_options().__dict__, **overrides})


def _char_width(text: str, bold: bool) -> float:
    return len(text) * (1.2 if bold else 1.0)


class TestWording:
    @pytest.mark.parametrize("raw,expected", [
        ("5", "6th Semester"),
        ("6", "6th Semester"),
        ("S1", "2nd Semester"),
        ("Semester 7", "8th Semester"),
        ("third", "third"),
    ])
    def test_semester_display(self, raw, expected):
        assert L.semester_display(raw) == expected

    def test_ordinals(self):
        assert [L.ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 102)] == [
            "1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st", "22nd", "102nd",
        ]

    def test_department_prefix(self):
        assert L.department_display("Civil Engineering") == "Department of Civil Engineering"
        assert L.department_display("Department of Physics") == "Department of Physics"

    def test_gender_wording(self):
        assert (L.honorific("male"), L.category_display("male")) == ("Mr.", "Men")
        assert (L.honorific("female"), L.category_display("female")) == ("Ms.", "Women")

    def test_titles_and_colours(self):
        assert L.certificate_title("participation") == "CERTIFICATE OF PARTICIPATION"
        assert L.certificate_title("2nd") == "CERTIFICATE OF MERIT"
        assert L.theme_color("1st") == L.COLORS["gold"]
        assert L.theme_color("participation") == L.COLORS["blue"]

    def test_merit_body(self):
        text = " ".join(r.text for r in L.body_runs(_opts(type="2nd"), "ANNUAL SPORTS MEET 2025-26", "10th Feb"))
        assert "Mr. MUHAMMED ARSHAD N" in text
        assert "(KTU Reg. No. WYD22EC074)," in text
        assert "6th Semester," in text
        assert "has secured the Second Position in the 400m Race (Men)" in text
        assert text.endswith("event held as part of the Annual Sports Meet 2025-26 on 10th Feb.")

    def test_participation_body(self):
        runs = L.body_runs(_opts(type="participation", gender="female"), "MEET", "today")
        text = " ".join(r.text for r in runs)
        assert "has successfully participated in the" in text
        assert "Position" not in text
        assert "(Women)" in text

    def test_place_run_uses_theme_colour(self):
        runs = L.body_runs(_opts(type="3rd"), "MEET", "today")
        place = next(r for r in runs if r.text == "Third Position")
        assert place.bold
        assert place.color == L.COLORS["bronze"]

    def test_filename(self):
        assert L.certificate_filename(_opts()) == "Certificate_1st_Place_Muhammed_Arshad_N.pdf"
        assert L.certificate_filename(_opts(type="participation", participant_name="A.B C")) == \
            "Certificate_Participation_A_B_C.pdf"


class TestJustify:
    def test_full_lines_fill_width_and_last_line_centres(self):
        runs = [L.Run("aaaa bbbb cccc dddd eeee"), L.Run("ffff", bold=True)]
        lines = L.justify(runs, 12, _char_width)
        assert len(lines) > 1
        for line in lines[:-1]:
            last = line[-1]
            assert line[0].x == 0
            assert last.x + _char_width(last.text, last.bold) == pytest.approx(12)
        tail = lines[-1]
        used = tail[-1].x + _char_width(tail[-1].text, tail[-1].bold) - tail[0].x
        assert tail[0].x == pytest.approx((12 - used) / 2)

    def test_styles_carry_through(self):
        lines = L.justify([L.Run("plain"), L.Run("BOLD", bold=True, color="#000000")], 100, _char_width)
        words = [w for line in lines for w in line]
        assert [(w.text, w.bold, w.color) for w in words] == [("plain", False, None), ("BOLD", True, "#000000")]

    def test_newline_forces_break(self):
        lines = L.justify([L.Run("one\ntwo")], 100, _char_width)
        assert [[w.text for w in line] for line in lines] == [["one"], ["two"]]

    def test_overlong_word_gets_its_own_line(self):
        lines = L.justify([L.Run("a verylongword b")], 5, _char_width)
        assert [[w.text for w in line] for line in lines] == [["a"], ["verylongword"], ["b"]]


class TestPdf:
    def _branding(self, cfg, images=None):
        return G.Branding(
            college_name=cfg.college_name,
            hod_name=cfg.hod_name,
            principal_name=cfg.principal_name,
            issuing_department=cfg.issuing_department,
            meet_title=cfg.meet_title,
            meet_dates=cfg.meet_dates,
            verification_base=cfg.public_base_url,
            images=images or {},
        )

    @pytest.mark.parametrize("cert_type", L.CERTIFICATE_TYPES)
    def test_renders_pdf(self, cfg, cert_type):
        pdf = G.render_certificate(_opts(type=cert_type), self._branding(cfg))
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_renders_with_images(self, cfg):
        png = G.qr_png("logo")
        images = {key: png for key in R.IMAGE_FIELDS}
        pdf = G.render_certificate(_opts(), self._branding(cfg, images))
        assert pdf.startswith(b"%PDF")

    def test_broken_image_is_skipped(self, cfg):
        pdf = G.render_certificate(_opts(), self._branding(cfg, {"college_logo_url": b"not an image"}))
        assert pdf.startswith(b"%PDF")

    def test_verification_url(self, cfg):
        assert self._branding(cfg).verification_url(" wyd22ec074 ") == "https://meet.example.org/?verify=WYD22EC074"

    def test_qr_png(self):
        assert G.qr_png("https://meet.example.org/?verify=X").startswith(b"\x89PNG")


class TestImages:
    def test_memory_urls_resolve_against_store(self, store):
        store.files["assets/logo.png"] = b"abc"
        assert G.load_image("memory://assets/logo.png", store=store) == b"abc"
        assert G.load_image("memory://assets/missing.png", store=store) is None

    def test_blank_url(self):
        assert G.load_image(None) is None
        assert G.load_image("") is None

    def test_http_failure_is_skipped(self, monkeypatch):
        def boom(url, timeout):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(G.requests, "get", boom)
        assert G.load_image("https://cdn.example.org/logo.png") is None

    def test_branding_falls_back_to_config(self, cfg, store):
        settings = R.SystemSettings(hod_name="Dr. Custom HOD")
        branding = G.build_branding(settings, cfg, store)
        assert branding.hod_name == "Dr. Custom HOD"
        assert branding.college_name == cfg.college_name
        assert branding.principal_name == cfg.principal_name
        assert set(branding.images) == set(R.IMAGE_FIELDS)

    def test_verification_url_ignores_trailing_slash(self, cfg):
        branding = TestPdf()._branding(cfg)
        branding.verification_base = "https://meet.example.org/"
        assert branding.verification_url("wyd1") == "https://meet.example.org/?verify=WYD1"
