import pytest

from provenance_api.services.byte_reader import ByteOrder, ByteReader, Rational, TruncatedDataError


def test_byte_order_from_marker():
	assert ByteOrder.from_marker(b"II") is ByteOrder.LITTLE
	assert ByteOrder.from_marker(b"MM") is ByteOrder.BIG
	assert ByteOrder.from_marker(b"XX") is None
	assert ByteOrder.from_marker(b"\xff\xd8") is None


def test_reads_honor_byte_order():
	data = b"\x01\x02\x03\x04"
	assert ByteReader(data, ByteOrder.BIG).u16(0) == 0x0102
	assert ByteReader(data, ByteOrder.LITTLE).u16(0) == 0x0201
	assert ByteReader(data, ByteOrder.BIG).u32(0) == 0x01020304
	assert ByteReader(data, ByteOrder.LITTLE).u32(0) == 0x04030201


def test_signed_reads():
	reader = ByteReader(b"\xff\xfe\xff\xff\xff\xff", ByteOrder.BIG)
	assert reader.i8(0) == -1
	assert reader.i16(0) == -2
	assert reader.i32(2) == -1


def test_rationals():
	reader = ByteReader(b"\x00\x00\x00\x01\x00\x00\x00\x64\xff\xff\xff\xfd\x00\x00\x00\x03", ByteOrder.BIG)
	assert reader.rational(0) == Rational(1, 100)
	assert reader.rational(0).value == pytest.approx(0.01)
	assert reader.srational(8) == Rational(-3, 3)
	assert reader.srational(8).value == -1.0


def test_zero_denominator_has_no_value():
	assert Rational(5, 0).value is None


def test_out_of_bounds_read_raises():
	reader = ByteReader(b"\x00\x01\x02", ByteOrder.LITTLE)
	assert not reader.in_bounds(2, 2)
	assert not reader.in_bounds(-1, 1)
	with pytest.raises(TruncatedDataError):
		reader.u16(2)
	with pytest.raises(TruncatedDataError):
		reader.raw(1, 5)
