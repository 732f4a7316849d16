from puzzflow import __about__


def test_package_metadata_names_project_authors():
    assert __about__.__author__ == "PuzzFlow contributors"
    assert __about__.__author__ in __about__.__copyright__
