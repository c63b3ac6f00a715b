from pathlib import Path

import pytest

from .utility.file_tester import check_tree_file, file_test_tree, get_all_test_files

BASE_TEST_FILES_PATH = Path(__file__).parent / "files" / "trees"


@pytest.mark.parametrize(
    "file_name", list(get_all_test_files(BASE_TEST_FILES_PATH, "yaml"))
)
def test_rule_tree(file_name: Path) -> None:
    file_test_tree(file_name, check_tree_file)
