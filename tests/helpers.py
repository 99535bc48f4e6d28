PARTY_A = 'A' * 32 + 'a1'
PARTY_B = 'B' * 32 + 'b2'
PARTY_C = 'C' * 32 + 'c3'
TREASURY = '0x' + 'ab' * 20
