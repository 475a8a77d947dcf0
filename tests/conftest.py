import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import slice_studio
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Common test fixtures
@pytest.fixture
def gradient_image():
    """300x300 RGB image whose pixel values encode their coordinates."""
    img = Image.new("RGB", (300, 300))
    img.putdata([(x % 256, y % 256, (x + y) % 256) for y in range(300) for x in range(300)])
    return img


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image on disk."""
    img = Image.new("RGB", (301, 200), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
