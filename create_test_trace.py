import random

def create_trace(path='test_trace.txt', num_accesses=64, seed=0):
    """Writes a sample trace: config record, hex addresses, -1 sentinel."""
    # S=8 E=2 B=16 m=16, LRU, hit 1, penalty 100
    header = "8 2 16 16 lru 1 100"
    rng = random.Random(seed)
    # A small hot set of blocks plus random strays, so both hits and misses show up
    hot = [0x0, 0x40, 0x80, 0x100]
    addresses = []
    for _ in range(num_accesses):
        if rng.random() < 0.7:
            addresses.append(rng.choice(hot))
        else:
            addresses.append(rng.randrange(0, 1 << 16))
    with open(path, 'w') as f:
        f.write(header + "\n")
        for a in addresses:
            f.write(f"{a:x}\n")
        f.write("-1\n")

if __name__ == '__main__':
    create_trace()
