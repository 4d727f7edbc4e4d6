"""Page behaviour driven through Streamlit's script runner."""

from streamlit.testing.v1 import AppTest

from data.records import PROGRAM_STATUSES


def _site_toggles_offline():
    from dataclasses import replace

    from config import get_config
    from views import dashboard

    cfg = replace(get_config(), supabase_url="", supabase_key="")
    dashboard._render_site_toggles(cfg, False)


def _programs_with_unknown_status():
    from config import get_config
    from data.records import Program
    from data.service import DataResult
    from views import programs

    legacy = Program(id="p-legacy", name="Legacy Meet", category="league", status="archived")
    original = programs.get_programs
    programs.get_programs = lambda cfg, use_mock: DataResult(data=[legacy], source="mock")
    try:
        programs.render(get_config(), True)
    finally:
        programs.get_programs = original


class TestSiteToggles:
    def test_failed_write_flips_toggle_back(self):
        at = AppTest.from_function(_site_toggles_offline).run()
        toggle = at.toggle(key="site_enable_requests")
        assert toggle.value is True

        toggle.set_value(False).run()
        assert at.toggle(key="site_enable_requests").value is True
        assert any("Couldn't update the setting." in e.value for e in at.error)

        # the reverted toggle doesn't write again on the next rerun
        at.run()
        assert not at.error


class TestPrograms:
    def test_unknown_status_and_category_render(self):
        at = AppTest.from_function(_programs_with_unknown_status).run()
        assert not at.exception
        status = next(s for s in at.selectbox if s.label == "Status")
        assert status.value == PROGRAM_STATUSES[0]
