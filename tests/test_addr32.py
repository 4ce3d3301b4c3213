import pytest

from x86kit.addr32 import (
    BASE_PAGE_SIZE,
    LARGE_PAGE_SIZE,
    IOAddr,
    PAddr,
    VAddr,
    align_down,
    align_up,
)


def test_align_0x1000():
    for base in (PAddr(0x1000), IOAddr(0x1000), VAddr(0x1000)):
        cls = type(base)
        assert base.base_page_offset() == 0x0
        assert base.large_page_offset() == 0x1000
        assert base.align_down_to_base_page() == cls(0x1000)
        assert base.align_down_to_large_page() == cls(0x0)
        assert base.align_up_to_base_page() == cls(0x1000)
        assert base.align_up_to_large_page() == cls(0x400000)
        assert base.is_base_page_aligned()
        assert not base.is_large_page_aligned()
        assert base.is_aligned(0x1)
        assert base.is_aligned(0x2)
        assert not base.is_aligned(0x3)
        assert base.is_aligned(0x4)


def test_align_0x1001():
    for base in (PAddr(0x1001), IOAddr(0x1001), VAddr(0x1001)):
        cls = type(base)
        assert base.base_page_offset() == 0x1
        assert base.large_page_offset() == 0x1001
        assert base.align_down_to_base_page() == cls(0x1000)
        assert base.align_down_to_large_page() == cls(0x0)
        assert base.align_up_to_base_page() == cls(0x2000)
        assert base.align_up_to_large_page() == cls(0x400000)
        assert not base.is_base_page_aligned()
        assert not base.is_large_page_aligned()
        assert base.is_aligned(0x1)
        assert not base.is_aligned(0x2)
        assert not base.is_aligned(0x3)
        assert not base.is_aligned(0x4)


def test_align_0x400000():
    for base in (PAddr(0x400000), IOAddr(0x400000), VAddr(0x400000)):
        cls = type(base)
        assert base.base_page_offset() == 0x0
        assert base.large_page_offset() == 0x0
        assert base.align_down_to_base_page() == cls(0x400000)
        assert base.align_down_to_large_page() == cls(0x400000)
        assert base.align_up_to_base_page() == cls(0x400000)
        assert base.align_up_to_large_page() == cls(0x400000)
        assert base.is_base_page_aligned()
        assert base.is_large_page_aligned()
        assert base.is_aligned(0x1)
        assert base.is_aligned(0x2)
        assert not base.is_aligned(0x3)
        assert base.is_aligned(0x4)


def test_align_0x400002():
    for base in (PAddr(0x400002), IOAddr(0x400002), VAddr(0x400002)):
        cls = type(base)
        assert base.base_page_offset() == 0x2
        assert base.large_page_offset() == 0x2
        assert base.align_down_to_base_page() == cls(0x400000)
        assert base.align_down_to_large_page() == cls(0x400000)
        assert base.align_up_to_base_page() == cls(0x401000)
        assert base.align_up_to_large_page() == cls(0x800000)
        assert not base.is_base_page_aligned()
        assert not base.is_large_page_aligned()
        assert base.is_aligned(0x1)
        assert base.is_aligned(0x2)
        assert not base.is_aligned(0x3)
        assert not base.is_aligned(0x4)


def test_page_sizes():
    assert align_up(1, BASE_PAGE_SIZE) == 0x1000
    assert align_up(1, LARGE_PAGE_SIZE) == 0x400000
    assert PAddr(BASE_PAGE_SIZE).is_base_page_aligned()
    assert PAddr(LARGE_PAGE_SIZE).is_large_page_aligned()


def test_free_align_functions():
    assert align_down(0x1234, 0x1000) == 0x1000
    assert align_up(0x1234, 0x1000) == 0x2000
    assert align_up(0x2000, 0x1000) == 0x2000


def test_align_up_overflow():
    with pytest.raises(OverflowError):
        align_up(0xFFFF_F001, 0x1000)
    with pytest.raises(OverflowError):
        PAddr(0xFFFF_FFFF).align_up_to_base_page()


def test_align_zero_rejected():
    with pytest.raises(ValueError):
        align_down(0x10, 0)


def test_zero():
    assert PAddr.zero().is_zero()
    assert IOAddr.zero().is_zero()
    assert VAddr.zero().is_zero()
    assert PAddr.zero() == PAddr(0)
    assert IOAddr.zero() == IOAddr(0)
    assert VAddr.zero() == VAddr(0)
    assert not PAddr(1).is_zero()
    assert not IOAddr(1).is_zero()
    assert not VAddr(1).is_zero()


def test_conversions():
    for addr in (PAddr(0xDEAD_B000), IOAddr(0xDEAD_B000), VAddr(0xDEAD_B000)):
        assert addr.as_u32() == 0xDEAD_B000
        assert addr.as_usize() == 0xDEAD_B000
        assert int(addr) == 0xDEAD_B000
        assert hex(addr) == "0xdeadb000"


def test_negative_wraps_like_i32_cast():
    assert PAddr(-1).as_u32() == 0xFFFF_FFFF


def test_vaddr_constructors():
    assert VAddr.from_u32(0x42) == VAddr(0x42)
    assert VAddr.from_usize(0x1_0000_0042) == VAddr(0x42)


def test_is_aligned_zero_align_false():
    assert not PAddr(0x1000).is_aligned(0)


def test_add_sub():
    assert PAddr(0x1000) + PAddr(0x10) == PAddr(0x1010)
    assert PAddr(0x1000) + 0x10 == PAddr(0x1010)
    assert PAddr(0x1010) - PAddr(0x10) == PAddr(0x1000)
    assert PAddr(0x1010) - 0x10 == PAddr(0x1000)
    assert IOAddr(0x1000) + IOAddr(0x10) == IOAddr(0x1010)
    assert IOAddr(0x1000) + 0x10 == IOAddr(0x1010)
    assert IOAddr(0x1010) - IOAddr(0x10) == IOAddr(0x1000)
    assert IOAddr(0x1010) - 0x10 == IOAddr(0x1000)
    assert VAddr(0x1000) + VAddr(0x10) == VAddr(0x1010)
    assert VAddr(0x1000) + 0x10 == VAddr(0x1010)
    assert VAddr(0x1010) - VAddr(0x10) == VAddr(0x1000)
    assert VAddr(0x1010) - 0x10 == VAddr(0x1000)


def test_paddr_add_sub_overflow():
    with pytest.raises(OverflowError):
        PAddr(0xFFFF_FFFF) + 1
    with pytest.raises(OverflowError):
        PAddr(0) - 1


def test_ioaddr_add_sub_overflow():
    with pytest.raises(OverflowError):
        IOAddr(0xFFFF_FFFF) + 1
    with pytest.raises(OverflowError):
        IOAddr(0) - 1


def test_vaddr_add_sub_overflow():
    with pytest.raises(OverflowError):
        VAddr(0xFFFF_FFFF) + 1
    with pytest.raises(OverflowError):
        VAddr(0) - 1


def test_mixed_types_rejected():
    with pytest.raises(TypeError):
        PAddr(1) + VAddr(1)
    assert PAddr(1) != VAddr(1)


def test_paddr_int_ops_return_int():
    assert PAddr(0x1234) % 0x1000 == 0x234
    assert PAddr(0x1234) % PAddr(0x1000) == PAddr(0x234)
    assert PAddr(0x1234) & 0xF00 == 0x200
    assert PAddr(0x1234) & PAddr(0xF00) == PAddr(0x200)
    assert PAddr(0x1200) | 0x34 == 0x1234
    assert PAddr(0x1200) | PAddr(0x34) == PAddr(0x1234)
    assert PAddr(0x1234) >> 4 == 0x123


def test_vaddr_int_bitops_keep_type():
    assert VAddr(0x1234) & 0xF00 == VAddr(0x200)
    assert VAddr(0x1200) | 0x34 == VAddr(0x1234)
    assert VAddr(0x1234) % 0x1000 == 0x234
    assert VAddr(0xFFC0_0000) >> 22 == 0x3FF


def test_ordering_and_hash():
    assert PAddr(1) < PAddr(2)
    assert sorted([VAddr(3), VAddr(1), VAddr(2)]) == [VAddr(1), VAddr(2), VAddr(3)]
    assert len({PAddr(5), PAddr(5), PAddr(6)}) == 2


def test_formatting():
    assert str(PAddr(0x1000)) == "4096"
    assert str(IOAddr(0x1000)) == "4096"
    assert str(VAddr(0x1000)) == "0x1000"
    assert repr(PAddr(0x1000)) == "0x1000"
    assert f"{PAddr(255):x}" == "ff"
    assert f"{VAddr(255)}" == "0xff"


def test_non_int_rejected():
    with pytest.raises(TypeError):
        PAddr("0x1000")