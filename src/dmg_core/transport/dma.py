# dmg_core/transport/dma.py
"""
OAM DMA転送ユニット。

FF46 - DMA - DMA Transfer and Start Address (W)
書き込まれた値を 100h 倍した値が転送元アドレスになります。
    Source:      XX00-XX9F   ;XX in range from 00-F1h
    Destination: FE00-FE9F
"""
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmg_core.transport.bus import MemoryBus

logger = logging.getLogger(__name__)

OAM_START = 0xFE00
OAM_TRANSFER_LENGTH = 0xA0


# @intent:responsibility 転送元ページからスプライト属性テーブル(OAM)へ160バイトをコピーします。
# @intent:rationale 生の配列コピーではなくバスの読み書き経路を通すことで、バンク領域からの転送も正しく扱います。
#                  転送先はFE00-FE9Fに限られるため、DMAレジスタ(FF46)への再帰的な起動は起こりません。
class DmaUnit:
    def __init__(self, bus: "MemoryBus"):
        self._bus = bus

    def transfer(self, source_page: int) -> None:
        source_base = (source_page & 0xFF) << 8
        logger.debug("DMA transfer from %04X to %04X", source_base, OAM_START)
        for i in range(OAM_TRANSFER_LENGTH):
            self._bus.write_byte(OAM_START + i, self._bus.read_byte(source_base + i))
