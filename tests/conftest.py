import os
import sys

import cv2
import numpy as np
import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


def write_image(path, width, height, bgr=(10, 20, 30)):
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :] = bgr
    assert cv2.imwrite(str(path), img)
    return img


@pytest.fixture
def make_group():
    """Write three replicate images ``<id>_<key>_R<i>.png`` into a folder."""

    def _make(folder, identifier, key, sizes=((100, 50), (120, 60), (90, 55)), bgr=(10, 20, 30)):
        paths = []
        for i, (w, h) in enumerate(sizes, start=1):
            path = folder / f"{identifier}_{key}_R{i}.png"
            write_image(path, w, h, bgr)
            paths.append(path)
        return paths

    return _make
