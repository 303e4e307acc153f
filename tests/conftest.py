import taichi as ti

ti.init(arch=ti.cpu)
