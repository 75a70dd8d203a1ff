import logging
import random
import time

import numpy as np

from operator import attrgetter
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from chip8vm.config import EmulatorConfig

logger = logging.getLogger(__name__)

# Constants
UPPER_CHAR_MASK = 240
LOWER_CHAR_MASK = 15
BYTE_MASK = 255
ADDRESS_MASK = 65535
MEMORY_SIZE = 4096
GAME_START_ADDRESS = 512
MAX_ROM_SIZE = MEMORY_SIZE - GAME_START_ADDRESS
FONT_START_ADDRESS = 80
FONT_END_ADDRESS = 160
FONT_SPRITE_HEIGHT = 5
INDEX_OVERFLOW_ADDRESS = 4096
REGISTER_COUNT = 16
FLAG_REGISTER = 15
KEY_COUNT = 16
STACK_CAPACITY = 32
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8
TIMER_DELAY = 1 / 60

FONT_SPRITES = bytes.fromhex(
    "f0909090f0"  # 0
    "2060202070"  # 1
    "f010f080f0"  # 2
    "f010f010f0"  # 3
    "9090f01010"  # 4
    "f080f010f0"  # 5
    "f080f090f0"  # 6
    "f010204040"  # 7
    "f090f090f0"  # 8
    "f090f010f0"  # 9
    "f090f09090"  # A
    "e090e090e0"  # B
    "f0808080f0"  # C
    "e0909090e0"  # D
    "f080f080f0"  # E
    "f080f08080"  # F
)


class EmulatorError(Exception):
    """
    Base class of every condition which must stop emulation.
    """


class StackUnderflowError(EmulatorError):
    pass


class StackOverflowError(EmulatorError):
    pass


class MemoryAccessError(EmulatorError):
    pass


class RomTooLargeError(EmulatorError):
    pass


class Instruction(NamedTuple):
    """
    A decoded instruction: the raw opcode, its class (first nibble) and its three parameter nibbles.
    """
    opcode: bytes
    kind: int
    x: int
    y: int
    n: int

    @property
    def nn(self) -> int:
        """
        The second byte of the opcode, used as an 8-bit immediate.
        """
        return self.opcode[1]

    @property
    def nnn(self) -> int:
        """
        The last 12 bits of the opcode, used as an address.
        """
        return (self.x << 8) + self.opcode[1]


def get_upper_char(byte: int) -> int:
    """
    Get the upper character (first 4 bits) of the given byte.
    :param byte: The byte from which to extract the character.
    :return: The upper character.
    """
    return (byte & UPPER_CHAR_MASK) >> 4


def get_lower_char(byte: int) -> int:
    """
    Get the lower character (last 4 bits) of the given byte.
    :param byte: The byte from which to extract the character.
    :return: The lower character.
    """
    return byte & LOWER_CHAR_MASK


def decode(opcode: bytes) -> Instruction:
    """
    Split a two byte opcode into its class and parameter nibbles.
    :param opcode: The opcode to decode.
    :return: The decoded instruction.
    """
    opcode = bytes(opcode)
    return Instruction(
        opcode,
        get_upper_char(opcode[0]),
        get_lower_char(opcode[0]),
        get_upper_char(opcode[1]),
        get_lower_char(opcode[1]),
    )


# Classes 0, 5, 8, 9, E and F need a second lookup on part of the instruction.
SYSTEM_HANDLERS = {
    0x0e0: "opcode_clear_screen",
    0x0ee: "opcode_return_from_subroutine",
}

REGISTER_COMPARE_HANDLERS = {
    5: {0x0: "opcode_if_register_equal"},
    9: {0x0: "opcode_if_register_not_equal"},
}

ALU_HANDLERS = {
    0x0: "opcode_set_register_value_other_register",
    0x1: "opcode_set_register_bitwise_or",
    0x2: "opcode_set_register_bitwise_and",
    0x3: "opcode_set_register_bitwise_xor",
    0x4: "opcode_add_other_register",
    0x5: "opcode_subtract_from_first_register",
    0x6: "opcode_bit_shift_right",
    0x7: "opcode_subtract_from_second_register",
    0xe: "opcode_bit_shift_left",
}

KEY_HANDLERS = {
    0x9e: "opcode_if_key_pressed",
    0xa1: "opcode_if_key_not_pressed",
}

MISC_HANDLERS = {
    0x07: "opcode_get_delay_timer",
    0x0a: "opcode_wait_for_key_press",
    0x15: "opcode_set_delay_timer",
    0x18: "opcode_set_sound_timer",
    0x1e: "opcode_register_i_addition",
    0x29: "opcode_set_register_i_to_hex_sprite_address",
    0x33: "opcode_binary_coded_decimal",
    0x55: "opcode_register_dump",
    0x65: "opcode_register_load",
}

OPCODE_TABLE: Dict[int, Union[str, Tuple[Callable[[Instruction], int], Dict[int, str]]]] = {
    0x0: (attrgetter("nnn"), SYSTEM_HANDLERS),
    0x1: "opcode_goto",
    0x2: "opcode_call_subroutine",
    0x3: "opcode_if_equal",
    0x4: "opcode_if_not_equal",
    0x5: (attrgetter("n"), REGISTER_COMPARE_HANDLERS[5]),
    0x6: "opcode_set_register_value",
    0x7: "opcode_add_value",
    0x8: (attrgetter("n"), ALU_HANDLERS),
    0x9: (attrgetter("n"), REGISTER_COMPARE_HANDLERS[9]),
    0xa: "opcode_set_register_i",
    0xb: "opcode_goto_addition",
    0xc: "opcode_random_bitwise_and",
    0xd: "opcode_draw_sprite",
    0xe: (attrgetter("nn"), KEY_HANDLERS),
    0xf: (attrgetter("nn"), MISC_HANDLERS),
}


def lookup_handler(instruction: Instruction) -> Optional[str]:
    """
    Find the name of the emulator method which executes the given instruction.
    :param instruction: The decoded instruction.
    :return: The handler name, or None if the instruction is not recognised.
    """
    entry = OPCODE_TABLE[instruction.kind]
    if isinstance(entry, str):
        return entry

    selector, handlers = entry
    return handlers.get(selector(instruction))


class Emulator:
    """
    The CHIP-8 interpreter: memory, registers, timers, framebuffer and the fetch-decode-execute cycle.
    """
    def __init__(self, config: Optional[EmulatorConfig] = None, clock: Callable[[], float] = time.perf_counter, rng: Optional[random.Random] = None):
        """
        Constructor.
        :param config: The emulator configuration, defaults are used if not provided.
        :param clock: Wall clock in seconds used for the 60Hz timers.
        :param rng: Random number generator for the random opcode.
        """
        self.config = config or EmulatorConfig()
        self.clock = clock
        self.random = rng or random.Random()

        self.ram = bytearray(MEMORY_SIZE)
        self.registers = bytearray(REGISTER_COUNT)
        self.register_i = 0
        self.delay = 0
        self.sound = 0
        self.program_counter = GAME_START_ADDRESS
        self.stack: List[int] = []
        self.key: Optional[int] = None
        self.pixels = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), np.ubyte)
        self.screen_updated = False
        self.last_timer_update = self.clock()

        self.load_font()

    def reset(self) -> None:
        """
        Reset the state of the emulator.
        """
        self.ram = bytearray(MEMORY_SIZE)
        self.registers = bytearray(REGISTER_COUNT)
        self.register_i = 0
        self.delay = 0
        self.sound = 0
        self.program_counter = GAME_START_ADDRESS
        self.stack = []
        self.key = None
        self.pixels.fill(0)
        self.screen_updated = True
        self.last_timer_update = self.clock()

        self.load_font()
        logger.debug("Emulator reset.")

    def load_rom(self, rom: bytes) -> None:
        """
        Copy a game into memory at the game start address and point the program counter at it.
        :param rom: The game to load.
        """
        if len(rom) > MAX_ROM_SIZE:
            message = f"Game is too large to fit in memory ({len(rom)} bytes, at most {MAX_ROM_SIZE} allowed)."
            logger.error(message)
            raise RomTooLargeError(message)

        self.ram[GAME_START_ADDRESS:GAME_START_ADDRESS + len(rom)] = rom
        self.program_counter = GAME_START_ADDRESS
        logger.debug(f"Loaded a game of {len(rom)} bytes at {hex(GAME_START_ADDRESS)}.")

    def load_font(self) -> None:
        """
        Load the sprites for the hexadecimal digits 0-f into memory.
        """
        self.ram[FONT_START_ADDRESS:FONT_END_ADDRESS] = FONT_SPRITES

    def set_key(self, key: Optional[int]) -> None:
        """
        Latch the key currently held down.
        :param key: The key code [0, 15], None if no key is held.
        """
        if key is not None and not 0 <= key < KEY_COUNT:
            raise ValueError(f"Invalid key {key}, keys are in the range [0, {KEY_COUNT - 1}].")

        if key != self.key:
            logger.debug(f"Key State Changed.  Key: {key}.")
        self.key = key

    def get_buffer(self) -> np.ndarray:
        """
        :return: The framebuffer as a flat, row-major sequence of 2048 pixels (0 or 1).
        """
        return self.pixels.ravel()

    def consume_screen_update(self) -> bool:
        """
        Check whether the screen changed since the last call, clearing the flag.
        :return: True if the screen must be redrawn.
        """
        updated = self.screen_updated
        self.screen_updated = False
        return updated

    @property
    def is_bell_active(self) -> bool:
        return self.sound != 0

    @property
    def cycle_duration(self) -> float:
        return self.config.cycle_duration

    # region Memory
    def read_memory(self, address: int) -> int:
        """
        Read a byte of memory, stopping the emulation if the address is out of range.
        :param address: The address to read.
        :return: The byte at the address.
        """
        self.check_address(address)
        return self.ram[address]

    def write_memory(self, address: int, value: int) -> None:
        """
        Write a byte of memory, stopping the emulation if the address is out of range.
        :param address: The address to write.
        :param value: The byte to store.
        """
        self.check_address(address)
        self.ram[address] = value

    @staticmethod
    def check_address(address: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            message = f"Memory access out of range at address {hex(address)}."
            logger.error(message)
            raise MemoryAccessError(message)
    # endregion

    # region Timers
    def update_timers(self) -> None:
        """
        Decrement both timers if at least a 60th of a second passed since they were last decremented.
        """
        now = self.clock()
        if now - self.last_timer_update < TIMER_DELAY:
            return

        self.last_timer_update = now
        self.decrement_delay_timer()
        self.decrement_sound_timer()

    def decrement_delay_timer(self) -> None:
        if self.delay > 0:
            self.delay -= 1

    def decrement_sound_timer(self) -> None:
        if self.sound > 0:
            self.sound -= 1
            if self.sound == 0:
                logger.debug("Sound timer expired, stopping sound.")
    # endregion

    # region Helpers
    @staticmethod
    def bounded_subtract(minuend: int, subtrahend: int) -> Tuple[int, int]:
        """
        Subtract the subtrahend from the minuend, bounded by the confines of a byte.
        :param minuend: The integer from which to subtract.
        :param subtrahend: The integer to subtract.
        :return: The result of the subtraction and the not borrow (1 if there was no borrow, 0 otherwise).
        """
        difference_of_registers = minuend - subtrahend
        result = difference_of_registers % 256
        not_borrow = 1 if difference_of_registers >= 0 else 0
        return result, not_borrow

    def skip_if(self, condition: bool) -> None:
        if condition:
            self.program_counter += 2
            logger.debug("Instruction skipped.")
        else:
            logger.debug("Instruction not skipped.")
    # endregion

    # region Opcodes
    def step(self) -> None:
        """
        Run a single cycle: update the timers, then fetch and execute the next instruction.
        """
        self.update_timers()
        self.execute(self.fetch())

    def fetch(self) -> Instruction:
        """
        Read the instruction at the program counter and move the program counter to the next one.
        :return: The decoded instruction.
        """
        self.check_address(self.program_counter)
        self.check_address(self.program_counter + 1)
        opcode = self.ram[self.program_counter:self.program_counter + 2]
        self.program_counter += 2
        return decode(opcode)

    def execute(self, instruction: Instruction) -> None:
        """
        Route the provided instruction to the correct method to execute it.
        :param instruction: The instruction to execute.
        """
        handler = lookup_handler(instruction)
        if handler is None:
            logger.error(f"Unimplemented / Invalid Opcode: {instruction.opcode.hex()}.")
            return

        getattr(self, handler)(instruction)

    def opcode_clear_screen(self, instruction: Instruction) -> None:
        """
        Clear the screen.
        :param instruction: The instruction to execute.
        """
        self.pixels.fill(0)
        self.screen_updated = True
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Clearing the screen.")

    def opcode_return_from_subroutine(self, instruction: Instruction) -> None:
        """
        Return from the current subroutine.
        :param instruction: The instruction to execute.
        """
        if not self.stack:
            message = "Tried to return from a subroutine when the stack is empty."
            logger.error(message)
            raise StackUnderflowError(message)

        self.program_counter = self.stack.pop()
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Return from subroutine, continue at {hex(self.program_counter)}.")

    def opcode_goto(self, instruction: Instruction) -> None:
        """
        Jump to the provided address.
        :param instruction: The instruction to execute.
        """
        self.program_counter = instruction.nnn
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Jump to address {hex(instruction.nnn)}.")

    def opcode_call_subroutine(self, instruction: Instruction) -> None:
        """
        Call the subroutine at the given address.
        :param instruction: The instruction to execute.
        """
        if len(self.stack) >= STACK_CAPACITY:
            message = f"Tried to call a subroutine with {STACK_CAPACITY} subroutines already on the stack."
            logger.error(message)
            raise StackOverflowError(message)

        self.stack.append(self.program_counter)
        self.program_counter = instruction.nnn
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Call subroutine at address {hex(instruction.nnn)}.")

    def opcode_if_equal(self, instruction: Instruction) -> None:
        """
        Skip the next instruction if the value of the provided register is equal to the provided value.
        :param instruction: The instruction to execute.
        """
        register_value = self.registers[instruction.x]
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Skip next instruction if register {instruction.x}'s value ({register_value}) is {instruction.nn}.")
        self.skip_if(register_value == instruction.nn)

    def opcode_if_not_equal(self, instruction: Instruction) -> None:
        """
        Skip the next instruction if the value of the provided register is not equal to the provided value.
        :param instruction: The instruction to execute.
        """
        register_value = self.registers[instruction.x]
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Skip next instruction if register {instruction.x}'s value ({register_value}) is not {instruction.nn}.")
        self.skip_if(register_value != instruction.nn)

    def opcode_if_register_equal(self, instruction: Instruction) -> None:
        """
        Skip the next instruction if the values of the two provided registers are equal.
        :param instruction: The instruction to execute.
        """
        first_register_value = self.registers[instruction.x]
        second_register_value = self.registers[instruction.y]
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Skip next instruction if register {instruction.x}'s value ({first_register_value}) is equal to register {instruction.y}'s value ({second_register_value}).")
        self.skip_if(first_register_value == second_register_value)

    def opcode_if_register_not_equal(self, instruction: Instruction) -> None:
        """
        Skip the next instruction if the values of the two provided registers differ.
        :param instruction: The instruction to execute.
        """
        first_register_value = self.registers[instruction.x]
        second_register_value = self.registers[instruction.y]
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Skip next instruction if register {instruction.x}'s value ({first_register_value}) is not equal to register {instruction.y}'s value ({second_register_value}).")
        self.skip_if(first_register_value != second_register_value)

    def opcode_set_register_value(self, instruction: Instruction) -> None:
        """
        Set the value of the provided register to the provided value.
        :param instruction: The instruction to execute.
        """
        self.registers[instruction.x] = instruction.nn
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set the value of register {instruction.x} to {instruction.nn}.")

    def opcode_add_value(self, instruction: Instruction) -> None:
        """
        Adds the provided value to the value of the provided register.  The carry flag (register 15) is not set.
        :param instruction: The instruction to execute.
        """
        self.registers[instruction.x] = (self.registers[instruction.x] + instruction.nn) % 256
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Add {instruction.nn} to the value of register {instruction.x}.")

    def opcode_set_register_value_other_register(self, instruction: Instruction) -> None:
        """
        Set the value of the first provided register to the value of the second provided register.
        :param instruction: The instruction to execute.
        """
        second_register_value = self.registers[instruction.y]
        self.registers[instruction.x] = second_register_value
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set the value of register {instruction.x} to the value of register {instruction.y} ({second_register_value}).")

    def opcode_set_register_bitwise_or(self, instruction: Instruction) -> None:
        """
        Sets the value of the first provided register to the bitwise or of itself and the value of the second provided register.
        :param instruction: The instruction to execute.
        """
        result = self.registers[instruction.x] | self.registers[instruction.y]
        self.registers[instruction.x] = result
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register {instruction.x} to the bitwise or of itself and register {instruction.y} ({result}).")

    def opcode_set_register_bitwise_and(self, instruction: Instruction) -> None:
        """
        Sets the value of the first provided register to the bitwise and of itself and the value of the second provided register.
        :param instruction: The instruction to execute.
        """
        result = self.registers[instruction.x] & self.registers[instruction.y]
        self.registers[instruction.x] = result
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register {instruction.x} to the bitwise and of itself and register {instruction.y} ({result}).")

    def opcode_set_register_bitwise_xor(self, instruction: Instruction) -> None:
        """
        Sets the value of the first provided register to the bitwise xor of itself and the value of the second provided register.
        :param instruction: The instruction to execute.
        """
        result = self.registers[instruction.x] ^ self.registers[instruction.y]
        self.registers[instruction.x] = result
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register {instruction.x} to the bitwise xor of itself and register {instruction.y} ({result}).")

    def opcode_add_other_register(self, instruction: Instruction) -> None:
        """
        Sets the value of the first provided register to the sum of itself and the value of the second provided register.  The carry flag (register 15) is set.
        :param instruction: The instruction to execute.
        """
        first_register_value = self.registers[instruction.x]
        second_register_value = self.registers[instruction.y]
        sum_of_registers = first_register_value + second_register_value
        result = sum_of_registers % 256
        carry = 1 if sum_of_registers >= 256 else 0
        self.registers[instruction.x] = result
        self.registers[FLAG_REGISTER] = carry
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Add register {instruction.y} to register {instruction.x} ({first_register_value} + {second_register_value} = {result}, carry = {carry}).")

    def opcode_subtract_from_first_register(self, instruction: Instruction) -> None:
        """
        Sets the value of the first provided register to the difference of itself and the value of the second provided register.  The not borrow flag (register 15) is set.
        :param instruction: The instruction to execute.
        """
        first_register_value = self.registers[instruction.x]
        second_register_value = self.registers[instruction.y]
        result, not_borrow = self.bounded_subtract(first_register_value, second_register_value)
        self.registers[instruction.x] = result
        self.registers[FLAG_REGISTER] = not_borrow
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Subtract register {instruction.y} from register {instruction.x} ({first_register_value} - {second_register_value} = {result}, not borrow = {not_borrow}).")

    def opcode_subtract_from_second_register(self, instruction: Instruction) -> None:
        """
        Sets the value of the first provided register to the difference of the value of the second provided register and itself.  The not borrow flag (register 15) is set.
        :param instruction: The instruction to execute.
        """
        first_register_value = self.registers[instruction.x]
        second_register_value = self.registers[instruction.y]
        result, not_borrow = self.bounded_subtract(second_register_value, first_register_value)
        self.registers[instruction.x] = result
        self.registers[FLAG_REGISTER] = not_borrow
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register {instruction.x} to register {instruction.y} minus itself ({second_register_value} - {first_register_value} = {result}, not borrow = {not_borrow}).")

    def opcode_bit_shift_right(self, instruction: Instruction) -> None:
        """
        Shift the value of the first provided register to the right by 1.  Set register 15 to the value of the least significant bit before the operation.
        When the shift quirk is enabled the second provided register is copied into the first one beforehand.
        :param instruction: The instruction to execute.
        """
        if self.config.shift_copies_vy:
            self.registers[instruction.x] = self.registers[instruction.y]
        register_value = self.registers[instruction.x]
        bit_shift = register_value >> 1
        least_significant_bit = register_value & 1
        self.registers[instruction.x] = bit_shift
        self.registers[FLAG_REGISTER] = least_significant_bit
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Shift register {instruction.x} right by 1 ({register_value} >> 1 = {bit_shift}, previous least significant bit = {least_significant_bit}).")

    def opcode_bit_shift_left(self, instruction: Instruction) -> None:
        """
        Shift the value of the first provided register to the left by 1.  Set register 15 to the value of the most significant bit before the operation.
        When the shift quirk is enabled the second provided register is copied into the first one beforehand.
        :param instruction: The instruction to execute.
        """
        if self.config.shift_copies_vy:
            self.registers[instruction.x] = self.registers[instruction.y]
        register_value = self.registers[instruction.x]
        bit_shift = (register_value << 1) & BYTE_MASK
        most_significant_bit = register_value >> 7
        self.registers[instruction.x] = bit_shift
        self.registers[FLAG_REGISTER] = most_significant_bit
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Shift register {instruction.x} left by 1 ({register_value} << 1 = {bit_shift}, previous most significant bit = {most_significant_bit}).")

    def opcode_set_register_i(self, instruction: Instruction) -> None:
        """
        Sets the value of register I to the provided value.
        :param instruction: The instruction to execute.
        """
        self.register_i = instruction.nnn
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register I to {hex(instruction.nnn)}.")

    def opcode_goto_addition(self, instruction: Instruction) -> None:
        """
        Jump to the provided address plus the value of register 0, or of the register named by the address' first nibble when the jump quirk is enabled.
        :param instruction: The instruction to execute.
        """
        register = instruction.x if self.config.jump_offset_uses_vx else 0
        register_value = self.registers[register]
        self.program_counter = instruction.nnn + register_value
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Jump to the provided address plus the value of register {register} ({hex(instruction.nnn)} + {hex(register_value)} = {hex(self.program_counter)}).")

    def opcode_random_bitwise_and(self, instruction: Instruction) -> None:
        """
        Set the value of the provided register to the bitwise and of the provided value and a random number [0, 255].
        :param instruction: The instruction to execute.
        """
        random_value = self.random.randint(0, 255)
        result = instruction.nn & random_value
        self.registers[instruction.x] = result
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register {instruction.x} to a random number masked by the provided value ({instruction.nn} & {random_value} = {result}).")

    def opcode_draw_sprite(self, instruction: Instruction) -> None:
        """
        Draws the sprite with the provided height found at the address denoted by the value of register I to the provided x and y coordinates.
        The starting coordinates wrap around the screen but the sprite itself is clipped at the bottom edge and wraps at the right edge.
        The collision flag (register 15) is set to 1 if a pixel was unset, 0 otherwise.
        :param instruction: The instruction to execute.
        """
        start_x = self.registers[instruction.x] % SCREEN_WIDTH
        start_y = self.registers[instruction.y] % SCREEN_HEIGHT
        self.registers[FLAG_REGISTER] = 0
        pixel_unset = 0
        for row in range(instruction.n):
            y_coordinate = start_y + row
            if y_coordinate >= SCREEN_HEIGHT:
                break

            byte = self.read_memory(self.register_i + row)
            for column in range(SPRITE_WIDTH):
                x_coordinate = (start_x + column) % SCREEN_WIDTH
                pixel = (byte >> (SPRITE_WIDTH - 1 - column)) & 1
                pixel_unset |= int(self.pixels[y_coordinate, x_coordinate]) & pixel
                self.pixels[y_coordinate, x_coordinate] ^= pixel
        self.registers[FLAG_REGISTER] = pixel_unset
        self.screen_updated = True
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Drawing a sprite with a height of {instruction.n} from address {hex(self.register_i)} at ({start_x}, {start_y}), collision = {pixel_unset}.")

    def opcode_if_key_pressed(self, instruction: Instruction) -> None:
        """
        Skip the next instruction if the key represented by the value of the provided register is pressed.
        :param instruction: The instruction to execute.
        """
        key = self.registers[instruction.x]
        pressed = self.key is not None and self.key == key
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Skip next instruction if the key represented by the value of register {instruction.x} ({key}) is pressed ({pressed}).")
        self.skip_if(pressed)

    def opcode_if_key_not_pressed(self, instruction: Instruction) -> None:
        """
        Skip the next instruction if the key represented by the value of the provided register is not pressed.
        :param instruction: The instruction to execute.
        """
        key = self.registers[instruction.x]
        pressed = self.key is not None and self.key == key
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Skip next instruction if the key represented by the value of register {instruction.x} ({key}) is not pressed ({pressed}).")
        self.skip_if(not pressed)

    def opcode_get_delay_timer(self, instruction: Instruction) -> None:
        """
        Sets the value of the provided register to the value of the delay timer.
        :param instruction: The instruction to execute.
        """
        self.registers[instruction.x] = self.delay
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set the value of register {instruction.x} to the value of the delay timer ({self.delay}).")

    def opcode_wait_for_key_press(self, instruction: Instruction) -> None:
        """
        Store the held key in the provided register.  With no key held the program counter is moved back so this instruction runs again on the next step.
        :param instruction: The instruction to execute.
        """
        if self.key is None:
            self.program_counter -= 2
            logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Waiting for a keypress to store in register {instruction.x}.")
            return

        self.registers[instruction.x] = self.key
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Storing the key {self.key} in register {instruction.x}.")

    def opcode_set_delay_timer(self, instruction: Instruction) -> None:
        """
        Sets the delay timer to the value of the provided register.
        :param instruction: The instruction to execute.
        """
        self.delay = self.registers[instruction.x]
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set the value of the delay timer to the value of register {instruction.x} ({self.delay}).")

    def opcode_set_sound_timer(self, instruction: Instruction) -> None:
        """
        Sets the sound timer to the value of the provided register.  The bell sounds while it is above 0.
        :param instruction: The instruction to execute.
        """
        self.sound = self.registers[instruction.x]
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set the value of the sound timer to the value of register {instruction.x} ({self.sound}).")

    def opcode_register_i_addition(self, instruction: Instruction) -> None:
        """
        Add the value of the provided register to register I.  The overflow flag (register 15) is set when I leaves the addressable range.
        :param instruction: The instruction to execute.
        """
        register_value = self.registers[instruction.x]
        register_i_value = self.register_i
        result = (register_i_value + register_value) & ADDRESS_MASK
        overflow = 1 if result >= INDEX_OVERFLOW_ADDRESS else 0
        self.register_i = result
        self.registers[FLAG_REGISTER] = overflow
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Add the value of register {instruction.x} to register I ({register_i_value} + {register_value} = {result}, overflow = {overflow}).")

    def opcode_set_register_i_to_hex_sprite_address(self, instruction: Instruction) -> None:
        """
        Sets the value of register I to the address of the hexadecimal sprite represented by the value in the provided register.
        :param instruction: The instruction to execute.
        """
        register_value = self.registers[instruction.x]
        self.register_i = FONT_START_ADDRESS + get_lower_char(register_value) * FONT_SPRITE_HEIGHT
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Set register I to the address ({hex(self.register_i)}) of the hexadecimal sprite for register {instruction.x} ({register_value}).")

    def opcode_binary_coded_decimal(self, instruction: Instruction) -> None:
        """
        Store the Binary Coded Decimal representation of the value of the provided register in memory, starting at the value of register I.
        Hundreds digit stored in memory at the location of the value of register I.
        Tens digit stored in memory at the location of the value of register I + 1.
        Units digit stored in memory at the location of the value of register I + 2.
        :param instruction: The instruction to execute.
        """
        register_value = self.registers[instruction.x]
        hundreds = register_value // 100 % 10
        tens = register_value // 10 % 10
        units = register_value % 10
        self.write_memory(self.register_i, hundreds)
        self.write_memory(self.register_i + 1, tens)
        self.write_memory(self.register_i + 2, units)
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Store the Binary Coded Decimal representation of register {instruction.x} ({register_value}) at {hex(self.register_i)}.")

    def opcode_register_dump(self, instruction: Instruction) -> None:
        """
        Store the values of all registers from register 0 to the provided register in memory, starting at the value of register I.
        :param instruction: The instruction to execute.
        """
        last_register = instruction.x
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Dumping registers 0 to {last_register} into memory, starting at {hex(self.register_i)}.")
        for register in range(last_register + 1):
            self.write_memory(self.register_i + register, self.registers[register])

    def opcode_register_load(self, instruction: Instruction) -> None:
        """
        Load the values of all registers from register 0 to the provided register from memory, starting at the value of register I.
        :param instruction: The instruction to execute.
        """
        last_register = instruction.x
        logger.debug(f"Execute Opcode {instruction.opcode.hex()}: Loading registers 0 to {last_register} from memory, starting at {hex(self.register_i)}.")
        for register in range(last_register + 1):
            self.registers[register] = self.read_memory(self.register_i + register)
    # endregion
