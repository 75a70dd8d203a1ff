from dataclasses import dataclass

DEFAULT_INSTRUCTIONS_PER_SECOND = 700


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Settings fixed for the lifetime of an emulator.

    shift_copies_vy: the shift opcodes (8XY6 / 8XYE) copy register Y into register X before shifting, like the COSMAC VIP.
    jump_offset_uses_vx: the offset jump (BNNN) adds register X (the first nibble of the address) instead of register 0, like CHIP-48 and SUPER-CHIP.
    """
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    shift_copies_vy: bool = False
    jump_offset_uses_vx: bool = False

    def __post_init__(self):
        if self.instructions_per_second <= 0:
            raise ValueError(f"Instructions per second must be positive, got {self.instructions_per_second}.")

    @property
    def cycle_duration(self) -> float:
        """
        :return: The time in seconds one instruction should take.
        """
        return 1 / self.instructions_per_second

    def instructions_per_frame(self, frame_rate: int) -> int:
        """
        How many instructions to run between two frames drawn at the given rate.
        :param frame_rate: Frames per second.
        :return: The number of instructions, at least 1.
        """
        return max(1, round(self.instructions_per_second / frame_rate))
