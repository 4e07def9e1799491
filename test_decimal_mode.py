#!/usr/bin/env python3
"""
Test NMOS decimal mode ADC/SBC
"""


def to_bcd(value):
    return ((value // 10) << 4) | (value % 10)


def adc(cpu, a, value, carry):
    cpu.memory.write(0x0200, 0x69)
    cpu.memory.write(0x0201, value)
    cpu.PC = 0x0200
    cpu.A = a
    cpu.C = carry
    cpu.D = 1
    return cpu.run_instruction()


def sbc(cpu, a, value, carry):
    cpu.memory.write(0x0200, 0xE9)
    cpu.memory.write(0x0201, value)
    cpu.PC = 0x0200
    cpu.A = a
    cpu.C = carry
    cpu.D = 1
    return cpu.run_instruction()


def test_adc_decimal_examples(cpu):
    assert adc(cpu, 0x58, 0x46, 1) == 2
    assert cpu.A == 0x05 and cpu.C == 1

    adc(cpu, 0x58, 0x46, 0)
    assert cpu.A == 0x04 and cpu.C == 1

    adc(cpu, 0x12, 0x34, 0)
    assert cpu.A == 0x46 and cpu.C == 0

    adc(cpu, 0x09, 0x01, 0)
    assert cpu.A == 0x10 and cpu.C == 0


def test_adc_decimal_zero_flag_follows_binary_sum(cpu):
    # BCD result is 00 but the binary sum is $9A
    adc(cpu, 0x99, 0x01, 0)
    assert cpu.A == 0x00
    assert cpu.C == 1
    assert cpu.Z == 0


def test_sbc_decimal_examples(cpu):
    assert sbc(cpu, 0x40, 0x13, 1) == 2
    assert cpu.A == 0x27 and cpu.C == 1

    sbc(cpu, 0x00, 0x01, 1)
    assert cpu.A == 0x99 and cpu.C == 0

    # Borrow in
    sbc(cpu, 0x50, 0x25, 0)
    assert cpu.A == 0x24 and cpu.C == 1

    sbc(cpu, 0x05, 0x10, 1)
    assert cpu.A == 0x95 and cpu.C == 0

    sbc(cpu, 0x46, 0x46, 1)
    assert cpu.A == 0x00 and cpu.Z == 1 and cpu.C == 1


def test_adc_decimal_all_bcd_pairs(cpu):
    for a in range(100):
        for b in range(100):
            for carry in (0, 1):
                adc(cpu, to_bcd(a), to_bcd(b), carry)
                total = a + b + carry
                assert cpu.A == to_bcd(total % 100), (a, b, carry)
                assert cpu.C == (1 if total >= 100 else 0), (a, b, carry)


def test_sbc_decimal_all_bcd_pairs(cpu):
    for a in range(100):
        for b in range(100):
            for carry in (0, 1):
                sbc(cpu, to_bcd(a), to_bcd(b), carry)
                diff = a - b - (1 - carry)
                assert cpu.A == to_bcd(diff % 100), (a, b, carry)
                assert cpu.C == (1 if diff >= 0 else 0), (a, b, carry)


def test_decimal_flag_cleared_restores_binary(cpu):
    adc(cpu, 0x09, 0x01, 0)
    assert cpu.A == 0x10
    cpu.D = 0
    cpu.memory.write(0x0200, 0x69)
    cpu.memory.write(0x0201, 0x01)
    cpu.PC = 0x0200
    cpu.A = 0x09
    cpu.C = 0
    cpu.run_instruction()
    assert cpu.A == 0x0A
