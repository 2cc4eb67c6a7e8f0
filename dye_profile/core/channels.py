# ============================================================================
# 3. dye_profile/core/channels.py - 颜色通道定义
# ============================================================================

from enum import Enum


class Channel(Enum):
    """颜色通道

    OpenCV 解码后的样本顺序固定为 B, G, R，这里把位置索引和通道名称
    绑定在一起，核心算法只按名称选择通道。
    """

    BLUE = "B"
    GREEN = "G"
    RED = "R"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        """在 BGR 样本三元组中的位置"""
        return _SAMPLE_INDEX[self]

    @property
    def display_name(self) -> str:
        """CSV 表头中使用的名称，例如 ``Redness``"""
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_tag(cls, tag) -> "Channel":
        """从 ``R``/``G``/``B`` (不区分大小写) 或通道名解析"""
        if isinstance(tag, Channel):
            return tag
        text = str(tag).strip().upper()
        for channel in cls:
            if text in (channel.value, channel.name):
                return channel
        raise ValueError(f"无效的通道: {tag!r}，请输入 R, G 或 B")


_SAMPLE_INDEX = {Channel.BLUE: 0, Channel.GREEN: 1, Channel.RED: 2}

_DISPLAY_NAMES = {
    Channel.BLUE: "Blueness",
    Channel.GREEN: "Greenness",
    Channel.RED: "Redness",
}
