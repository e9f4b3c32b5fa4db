# dmg_core/arch/lr35902/state.py
"""
LR35902 CPU固有の状態定義。

レジスタ（A, B, C, D, E, F, HL, PC, SP）とフラグ（Z, N, H, C, IME）、
および割り込み許可/禁止の遅延適用を表す保留フラグを保持します。

  16bit Hi   Lo   Name/Function
  AF    A    F    Accumulator & Flags
  BC    B    C    BC
  DE    D    E    DE
  HL    -    -    HL (16bitのまま保持し、H/Lはシフトで導出)
  SP    -    -    Stack Pointer
  PC    -    -    Program Counter
"""
from dataclasses import dataclass

from dmg_core.core.state import CpuState

# LR35902フラグビットマスク (Fレジスタの上位ニブル)
# @intent:constant 下位ニブルは未使用で、フラグ更新後は常に0です。
Z_FLAG = 0b10000000  # Zero
N_FLAG = 0b01000000  # Add/Sub (BCD)
H_FLAG = 0b00100000  # Half Carry (BCD)
C_FLAG = 0b00010000  # Carry

# @intent:constant ブートROM終了直後のレジスタ値。
POST_BOOT_AF = 0x01B0
POST_BOOT_BC = 0x0013
POST_BOOT_DE = 0x00D8
POST_BOOT_HL = 0x014D
POST_BOOT_PC = 0x0100
POST_BOOT_SP = 0xFFFE


# @intent:responsibility LR35902 CPUのレジスタ、フラグ、保留中の割り込み制御状態を保持します。
# @intent:rationale フラグは個別のboolとして保持し、Fレジスタへは update_af_low() で一括して直列化します。
#                  全てのフラグ変更命令は同じ直列化規則を用いる必要があります。
@dataclass
class Lr35902CpuState(CpuState):
    """
    LR35902 CPUのレジスタ状態を保持するデータクラス。
    フィールドの既定値はブートROM実行後の電源投入時の値です。
    """
    pc: int = POST_BOOT_PC
    sp: int = POST_BOOT_SP

    a: int = 0x01
    b: int = 0x00
    c: int = 0x13
    d: int = 0x00
    e: int = 0xD8
    f: int = 0xB0
    hl: int = POST_BOOT_HL

    zero: bool = True
    sub: bool = False
    half_carry: bool = True
    carry: bool = True
    # IME - Interrupt Master Enable Flag (Write Only)
    #   False - Disable all Interrupts
    #   True  - Enable all Interrupts that are enabled in IE Register (FFFF)
    interrupt_master: bool = False

    # DI/EI の効果は次の1命令の実行後に現れる
    pending_interrupt_disabled: bool = False
    pending_interrupt_enabled: bool = False

    # 16-bit register pairs
    @property
    def af(self) -> int:
        return (self.a << 8) | self.f

    # @intent:rationale Fへの書き込み（POP AFなど）では下位ニブルを捨て、boolフラグも同期させます。
    @af.setter
    def af(self, value: int) -> None:
        self.a = (value >> 8) & 0xFF
        f = value & 0xF0
        self.zero = (f & Z_FLAG) != 0
        self.sub = (f & N_FLAG) != 0
        self.half_carry = (f & H_FLAG) != 0
        self.carry = (f & C_FLAG) != 0
        self.f = f

    @property
    def bc(self) -> int:
        return (self.b << 8) | self.c

    @bc.setter
    def bc(self, value: int) -> None:
        self.b = (value >> 8) & 0xFF
        self.c = value & 0xFF

    @property
    def de(self) -> int:
        return (self.d << 8) | self.e

    @de.setter
    def de(self, value: int) -> None:
        self.d = (value >> 8) & 0xFF
        self.e = value & 0xFF

    # H/L はHLからの導出ビュー
    @property
    def h(self) -> int:
        return (self.hl >> 8) & 0xFF

    @h.setter
    def h(self, value: int) -> None:
        self.hl = ((value & 0xFF) << 8) | (self.hl & 0x00FF)

    @property
    def l(self) -> int:
        return self.hl & 0xFF

    @l.setter
    def l(self, value: int) -> None:
        self.hl = (self.hl & 0xFF00) | (value & 0xFF)

    # @intent:responsibility 4つのフラグをFレジスタの上位ニブル（bit 7..4）へ直列化します。
    def update_af_low(self) -> None:
        """
        Z, N, H, C フラグをFレジスタのビット7, 6, 5, 4に書き込みます。
        下位ニブルは常に0になります。
        """
        f = 0
        if self.zero:
            f |= Z_FLAG
        if self.sub:
            f |= N_FLAG
        if self.half_carry:
            f |= H_FLAG
        if self.carry:
            f |= C_FLAG
        self.f = f

    # @intent:responsibility 2つの値を比較し、フラグを設定します。
    def compare(self, val1: int, val2: int) -> None:
        """
        Z = (val1 == val2), C = (val1 > val2),
        H = ((val1 & 0x0F) > (val2 & 0x0F)), N = 1 を無条件に設定し、Fを更新します。
        """
        self.zero = val1 == val2
        self.carry = val1 > val2
        self.half_carry = (val1 & 0x0F) > (val2 & 0x0F)
        self.sub = True
        self.update_af_low()
