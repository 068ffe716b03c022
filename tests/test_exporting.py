from src.rndc_admin.exporting import page_slices, report_filename, slugify


def test_slugify_strips_accents_and_symbols():
    assert slugify("Conferencia Nacional 2024 ¡Ñandú!") == "conferencia-nacional-2024-nandu"
    assert slugify("***") == "reporte"


def test_report_filename_with_and_without_region():
    assert report_filename("Conf Lima") == "reporte-conf-lima.pdf"
    assert report_filename("Conf Lima", "Región Sur") == "reporte-conf-lima-region-sur.pdf"


def test_page_slices_cover_whole_image():
    slices = page_slices(1000, 5000, 595.0, 842.0, margin=24)
    assert slices[0][0] == 0
    assert sum(h for _y, h in slices) == 5000
    for (y1, h1), (y2, _h2) in zip(slices, slices[1:]):
        assert y1 + h1 == y2


def test_page_slices_single_page_and_empty():
    assert page_slices(100, 50, 595.0, 842.0) == [(0, 50)]
    assert page_slices(0, 50, 595.0, 842.0) == []
