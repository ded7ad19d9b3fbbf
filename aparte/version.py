# pylint: disable=C0111,C0103
version = '0.4.0'
